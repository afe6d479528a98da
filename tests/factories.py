# -*- coding: utf-8 -*-
"""
backend/tests/factories.py

Fábricas de datos para tests: filas sembradas en BD y bodies firmados
de Wompi, ePayco y WhatsApp.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.messaging.enums import InstanceStatus, MessagingProvider
from app.modules.messaging.models import WhatsAppInstance
from app.modules.payments.enums import (
    OrderPaymentStatus,
    PaymentProvider,
    SubscriptionStatus,
)
from app.modules.payments.models import (
    Order,
    Organization,
    PaymentGatewayConfig,
    PaymentTransaction,
    Subscription,
    WebhookLog,
)
from app.modules.payments.services.webhooks.signature_verification import (
    build_hmac_signature_header,
    compute_epayco_signature,
    compute_wompi_checksum,
)
from app.shared.security.encryption import encrypt_secret

TEST_MASTER_KEY = "test-master-key"
WOMPI_SECRET = "test_events_secret_123"
EPAYCO_CUSTOMER_ID = "1555482"
EPAYCO_P_KEY = "p-key-secret"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
# Anidamiento que supera el límite de recursión del decodificador JSON
DEEPLY_NESTED_JSON = b"[" * 200_000 + b"]" * 200_000


# =============================================================================
# FILAS EN BD
# =============================================================================

async def create_organization(session: AsyncSession, slug: str = "tienda-demo") -> Organization:
    org = Organization(id=str(uuid.uuid4()), slug=slug, name=slug.title())
    session.add(org)
    await session.commit()
    return org


async def create_order(
    session: AsyncSession,
    organization_id: str,
    payment_reference: str = "ORD-1001",
    payment_status: OrderPaymentStatus = OrderPaymentStatus.PENDING,
) -> Order:
    order = Order(
        id=str(uuid.uuid4()),
        organization_id=organization_id,
        payment_reference=payment_reference,
        payment_status=payment_status,
        total_minor_units=150000,
    )
    session.add(order)
    await session.commit()
    return order


async def create_subscription(
    session: AsyncSession,
    organization_id: str,
    status: SubscriptionStatus = SubscriptionStatus.TRIALING,
    subscription_id: Optional[str] = None,
    current_period_end=None,
) -> Subscription:
    subscription = Subscription(
        id=subscription_id or str(uuid.uuid4()),
        organization_id=organization_id,
        status=status,
        current_period_end=current_period_end,
    )
    session.add(subscription)
    await session.commit()
    return subscription


async def create_gateway_config(
    session: AsyncSession,
    provider: PaymentProvider,
    organization_id: Optional[str] = None,
    integrity_secret: Optional[str] = WOMPI_SECRET,
    encryption_key: Optional[str] = None,
    encrypt: bool = True,
) -> PaymentGatewayConfig:
    def _store(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return encrypt_secret(value, TEST_MASTER_KEY) if encrypt else value

    config = PaymentGatewayConfig(
        id=str(uuid.uuid4()),
        organization_id=organization_id,
        provider=provider,
        public_key="pub_test_123",
        integrity_secret_encrypted=_store(integrity_secret),
        encryption_key_encrypted=_store(encryption_key),
        is_test_mode=True,
        is_active=True,
    )
    session.add(config)
    await session.commit()
    return config


async def create_instance(
    session: AsyncSession,
    organization_id: str,
    instance_name: str = "tienda-demo-wa",
    provider: MessagingProvider = MessagingProvider.EVOLUTION,
    status: InstanceStatus = InstanceStatus.DISCONNECTED,
    meta_phone_number_id: Optional[str] = None,
    webhook_secret: Optional[str] = None,
) -> WhatsAppInstance:
    instance = WhatsAppInstance(
        id=str(uuid.uuid4()),
        organization_id=organization_id,
        instance_name=instance_name,
        provider=provider,
        status=status,
        meta_phone_number_id=meta_phone_number_id,
        webhook_secret_encrypted=encrypt_secret(webhook_secret, TEST_MASTER_KEY) if webhook_secret else None,
    )
    session.add(instance)
    await session.commit()
    return instance


async def count_rows(session: AsyncSession, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def ledger_rows(session: AsyncSession):
    result = await session.execute(select(PaymentTransaction))
    return result.scalars().all()


async def webhook_logs(session: AsyncSession):
    result = await session.execute(select(WebhookLog))
    return result.scalars().all()


# =============================================================================
# BODIES DE PROVEEDORES
# =============================================================================

def build_wompi_payload(
    *,
    tx_id: str = "1234-1610641025-49201",
    reference: str = "ORD-1001",
    status: str = "APPROVED",
    amount_in_cents: int = 150000,
    event: Optional[str] = "transaction.updated",
    secret: str = WOMPI_SECRET,
    uppercase_checksum: bool = False,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "event": event,
        "data": {
            "transaction": {
                "id": tx_id,
                "reference": reference,
                "status": status,
                "amount_in_cents": amount_in_cents,
                "currency": "COP",
                "payment_method_type": "CARD",
                "customer_email": "cliente@example.com",
            }
        },
        "environment": "test",
        "signature": {
            "properties": [
                "transaction.id",
                "transaction.status",
                "transaction.amount_in_cents",
            ],
            "checksum": "",
        },
        "timestamp": 1760263200,
        "sent_at": "2026-10-12T10:00:00.000Z",
    }
    if event is None:
        del payload["event"]
    checksum = compute_wompi_checksum(payload, secret)
    payload["signature"]["checksum"] = checksum.upper() if uppercase_checksum else checksum
    return payload


def wompi_body(**kwargs) -> bytes:
    return json.dumps(build_wompi_payload(**kwargs)).encode("utf-8")


def build_epayco_fields(
    *,
    ref_payco: str = "88997766",
    invoice: str = "ORD-1001",
    cod_response: str = "1",
    amount: str = "1500.00",
    customer_id: str = EPAYCO_CUSTOMER_ID,
    p_key: str = EPAYCO_P_KEY,
) -> Dict[str, str]:
    fields = {
        "x_ref_payco": ref_payco,
        "x_transaction_id": f"TX-{ref_payco}",
        "x_amount": amount,
        "x_currency_code": "COP",
        "x_cod_response": cod_response,
        "x_id_invoice": invoice,
        "x_franchise": "VS",
        "x_transaction_date": "2026-10-12 10:00:00",
        "x_customer_email": "cliente@example.com",
    }
    fields["x_signature"] = compute_epayco_signature(fields, customer_id, p_key)
    return fields


def epayco_form(**kwargs) -> Tuple[bytes, Dict[str, str]]:
    """Body form-urlencoded + headers, como lo envía ePayco."""
    body = urlencode(build_epayco_fields(**kwargs)).encode("utf-8")
    return body, {"content-type": FORM_CONTENT_TYPE}


def build_evolution_message(
    instance: str = "tienda-demo-wa",
    text: str = "Hola, ¿tienen envíos?",
    from_me: bool = False,
) -> Dict[str, Any]:
    return {
        "event": "messages.upsert",
        "instance": instance,
        "data": {
            "key": {"remoteJid": "573001234567@s.whatsapp.net", "fromMe": from_me, "id": "3EB0A1B2C3"},
            "pushName": "Laura",
            "message": {"conversation": text},
            "messageTimestamp": 1760263200,
        },
    }


def build_evolution_connection(instance: str = "tienda-demo-wa", state: str = "open") -> Dict[str, Any]:
    return {"event": "connection.update", "instance": instance, "data": {"state": state}}


def build_meta_notification(phone_number_id: str = "109876543210", text: str = "Hola") -> Dict[str, Any]:
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WABA-1",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "messaging_product": "whatsapp",
                            "metadata": {"display_phone_number": "573000000000", "phone_number_id": phone_number_id},
                            "contacts": [{"wa_id": "573001234567", "profile": {"name": "Laura"}}],
                            "messages": [
                                {
                                    "from": "573001234567",
                                    "id": "wamid.HBgM",
                                    "timestamp": "1760263200",
                                    "type": "text",
                                    "text": {"body": text},
                                }
                            ],
                        },
                    }
                ],
            }
        ],
    }


def signed_headers(secret: str, body: bytes, header: str = "x-webhook-signature") -> Dict[str, str]:
    return {"content-type": "application/json", header: build_hmac_signature_header(secret, body)}


__all__ = [
    "TEST_MASTER_KEY",
    "WOMPI_SECRET",
    "EPAYCO_CUSTOMER_ID",
    "EPAYCO_P_KEY",
    "FORM_CONTENT_TYPE",
    "DEEPLY_NESTED_JSON",
    "create_organization",
    "create_order",
    "create_subscription",
    "create_gateway_config",
    "create_instance",
    "count_rows",
    "ledger_rows",
    "webhook_logs",
    "build_wompi_payload",
    "wompi_body",
    "build_epayco_fields",
    "epayco_form",
    "build_evolution_message",
    "build_evolution_connection",
    "build_meta_notification",
    "signed_headers",
]

# Fin del archivo backend/tests/factories.py
