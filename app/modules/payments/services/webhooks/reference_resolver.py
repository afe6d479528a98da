# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/reference_resolver.py

Resolución de la referencia del proveedor a la entidad dueña del pago.

Esquemas de referencia:
- Suscripción (actual): SUB-{primeros 8 chars del UUID}-{timestampMs}-{sufijo}
- Suscripción (legado): sub_{UUID completo}_{timestamp}
- Orden: cualquier otra cadena; se compara por igualdad contra
  orders.payment_reference (la generamos y guardamos al iniciar el pago)

El id corto de 8 caracteres NO es llave única: siempre se confirma contra
el id completo cargado de BD y, si hay ambigüedad, no se adivina.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.repositories import (
    OrderRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from app.modules.payments.schemas import PaymentEvent

from .errors import ReferenceNotFound

logger = logging.getLogger(__name__)

ENTITY_ORDER = "order"
ENTITY_SUBSCRIPTION = "subscription"

SUBSCRIPTION_REFERENCE_RE = re.compile(r"^SUB-(?P<short_id>[0-9a-fA-F]{8})-(?P<ts>\d+)-(?P<suffix>[A-Za-z0-9]+)$")
LEGACY_SUBSCRIPTION_REFERENCE_RE = re.compile(
    r"^sub_(?P<full_id>[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})_(?P<ts>\d+)$"
)


@dataclass(frozen=True)
class SubscriptionReference:
    short_id: Optional[str] = None
    full_id: Optional[str] = None


@dataclass(frozen=True)
class LookupKey:
    entity_type: str
    entity_id: str
    organization_id: Optional[str]


def parse_subscription_reference(reference: Optional[str]) -> Optional[SubscriptionReference]:
    """Devuelve la parte de id de una referencia de suscripción, o None si no lo es."""
    if not reference:
        return None
    match = SUBSCRIPTION_REFERENCE_RE.match(reference)
    if match:
        return SubscriptionReference(short_id=match.group("short_id").lower())
    match = LEGACY_SUBSCRIPTION_REFERENCE_RE.match(reference)
    if match:
        return SubscriptionReference(full_id=match.group("full_id").lower())
    return None


def is_subscription_reference(reference: Optional[str]) -> bool:
    return parse_subscription_reference(reference) is not None


def build_subscription_reference(
    subscription_id: str,
    timestamp_ms: Optional[int] = None,
    suffix: Optional[str] = None,
) -> str:
    """Referencia SUB-... que se envía al proveedor al iniciar el cobro."""
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    rand = suffix or secrets.token_hex(2)
    return f"SUB-{subscription_id[:8]}-{ts}-{rand}"


class ReferenceResolver:
    """Resuelve PaymentEvent → LookupKey (solo lecturas)."""

    def __init__(
        self,
        order_repo: Optional[OrderRepository] = None,
        subscription_repo: Optional[SubscriptionRepository] = None,
        transaction_repo: Optional[TransactionRepository] = None,
    ) -> None:
        self.order_repo = order_repo or OrderRepository()
        self.subscription_repo = subscription_repo or SubscriptionRepository()
        self.transaction_repo = transaction_repo or TransactionRepository()

    async def resolve(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        organization_id: Optional[str],
    ) -> LookupKey:
        """
        Raises:
            ReferenceNotFound: la referencia no corresponde a ninguna entidad.
        """
        if is_subscription_reference(event.provider_reference):
            subscription_id = await self.resolve_subscription_id(
                session,
                event.provider_reference,
                organization_id=organization_id,
                event=event,
            )
            if subscription_id is None:
                raise ReferenceNotFound(f"Suscripción no encontrada para referencia {event.provider_reference!r}")
            subscription = await self.subscription_repo.get_for_update_check(session, subscription_id)
            return LookupKey(
                entity_type=ENTITY_SUBSCRIPTION,
                entity_id=subscription_id,
                organization_id=subscription.organization_id if subscription else organization_id,
            )

        return await self.resolve_order_lookup(session, event, organization_id)

    async def resolve_subscription_id(
        self,
        session: AsyncSession,
        reference: str,
        organization_id: Optional[str] = None,
        event: Optional[PaymentEvent] = None,
    ) -> Optional[str]:
        parsed = parse_subscription_reference(reference)
        if parsed is None:
            return None

        if parsed.full_id is not None:
            subscription = await self.subscription_repo.get_for_update_check(
                session, parsed.full_id, organization_id
            )
            return subscription.id if subscription else None

        candidates = await self.subscription_repo.find_by_id_prefix(
            session, parsed.short_id, organization_id=organization_id
        )
        # el LIKE es solo un filtro: se confirma el prefijo sobre el id completo
        exact = [c for c in candidates if c.id[:8].lower() == parsed.short_id]

        if len(exact) == 1:
            return exact[0].id
        if not exact:
            return None

        # Ambigüedad: solo se acepta si el ledger ya vinculó esta transacción
        if event is not None:
            ledger_row = await self.transaction_repo.find_by_provider_tx(
                session,
                event.provider,
                event.provider_transaction_id,
            )
            if ledger_row is not None and ledger_row.subscription_id in {c.id for c in exact}:
                return ledger_row.subscription_id

        logger.error(
            "subscription_reference_ambiguous reference=%s candidates=%d",
            reference,
            len(exact),
        )
        return None

    async def resolve_order_lookup(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        organization_id: Optional[str],
    ) -> LookupKey:
        if organization_id is None:
            raise ReferenceNotFound("Referencia de orden sin organización")

        ledger_row = await self.transaction_repo.get_by_provider_tx(
            session,
            event.provider,
            event.provider_transaction_id,
            organization_id,
        )
        if ledger_row is not None and ledger_row.order_id:
            return LookupKey(ENTITY_ORDER, ledger_row.order_id, organization_id)

        if event.provider_reference:
            order = await self.order_repo.find_by_payment_reference(
                session, organization_id, event.provider_reference
            )
            if order is not None:
                return LookupKey(ENTITY_ORDER, order.id, organization_id)

        raise ReferenceNotFound(f"Orden no encontrada para referencia {event.provider_reference!r}")


__all__ = [
    "ENTITY_ORDER",
    "ENTITY_SUBSCRIPTION",
    "SubscriptionReference",
    "LookupKey",
    "parse_subscription_reference",
    "is_subscription_reference",
    "build_subscription_reference",
    "ReferenceResolver",
]

# Fin del archivo backend/app/modules/payments/services/webhooks/reference_resolver.py
