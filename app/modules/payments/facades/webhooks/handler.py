# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/handler.py

Orquestación de webhooks de pago (Wompi, ePayco).

Flujo:
1. Adaptador del proveedor (404 si no existe)
2. Parseo del body (400 si está mal formado)
3. Credenciales de la organización o de la plataforma (404 / 400 / 500)
4. Verificación de firma (401)
5. Normalización: eventos no accionables se reconocen con 200
6. Conciliación idempotente + commit (500 en fallo de persistencia)
7. Auditoría en webhook_logs, después del commit/rollback, en todo camino

Cualquier excepción no prevista se responde como 500 genérico.

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.payments.enums import PaymentProvider, WebhookOutcome
from app.modules.payments.metrics import (
    map_webhook_result_to_outcome,
    observe_webhook_outcome,
    observe_webhook_received,
    observe_webhook_rejected,
    observe_webhook_verified,
)
from app.modules.payments.services.gateway_config_provider import GatewayConfigProvider
from app.modules.payments.services.reconciliation_service import ReconciliationService
from app.modules.payments.services.webhook_audit_service import WebhookAuditLogger
from app.modules.payments.services.webhooks.errors import (
    PayloadInvalid,
    PersistenceFailure,
    ReferenceNotFound,
    SignatureInvalid,
    WebhookError,
)
from app.modules.payments.services.webhooks.payload_normalizer import (
    WebhookNormalizationError,
    parse_webhook_body,
)

from .providers import allow_insecure_webhooks, get_payment_adapter

logger = logging.getLogger(__name__)


@dataclass
class WebhookHttpResult:
    """Respuesta HTTP ya decidida por el handler."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


async def handle_payment_webhook(
    session: AsyncSession,
    *,
    session_factory: async_sessionmaker[AsyncSession],
    provider_name: str,
    org_slug: Optional[str],
    raw_body: bytes,
    headers: Mapping[str, str],
    config_provider: Optional[GatewayConfigProvider] = None,
    reconciler: Optional[ReconciliationService] = None,
    audit: Optional[WebhookAuditLogger] = None,
) -> WebhookHttpResult:
    """
    Procesa un webhook de pago de punta a punta.

    Nunca lanza WebhookError: lo traduce a WebhookHttpResult con
    `{"error": mensaje_público}`. El detalle interno solo va a logs y auditoría.
    """
    config_provider = config_provider or GatewayConfigProvider()
    reconciler = reconciler or ReconciliationService()
    audit = audit or WebhookAuditLogger(session_factory)

    started = time.perf_counter()
    provider = PaymentProvider.parse(provider_name)
    label = provider.value if provider is not None else "unknown"
    normalized_headers = {k.lower(): v for k, v in headers.items()}
    observe_webhook_received(label)

    organization_id: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    event_type: Optional[str] = None

    try:
        adapter = get_payment_adapter(provider)

        try:
            payload = parse_webhook_body(raw_body, normalized_headers.get("content-type"))
        except WebhookNormalizationError as e:
            raise PayloadInvalid(str(e)) from e
        event_type = adapter.event_type(payload)

        credentials = await config_provider.get(session, org_slug, adapter.provider)
        organization_id = credentials.organization_id

        if allow_insecure_webhooks():
            logger.warning(f"[webhook:{label}] Verificación de firma omitida (modo inseguro de desarrollo)")
            verified = True
        else:
            verified = adapter.verify(raw_body, normalized_headers, credentials)
        observe_webhook_verified(label, verified)
        if not verified:
            raise SignatureInvalid(f"Firma {label} inválida para {org_slug or 'plataforma'}")

        try:
            event = adapter.normalize(payload)
        except WebhookNormalizationError as e:
            raise PayloadInvalid(str(e)) from e

        if event is None:
            body: Dict[str, Any] = {"received": True, "ignored": True}
        else:
            result = await reconciler.reconcile(session, event, organization_id)
            try:
                await session.commit()
            except SQLAlchemyError as e:
                raise PersistenceFailure(f"Commit falló: {type(e).__name__}") from e
            body = {"received": True, "reconcile": result.as_dict()}
            if not result.transition_applied:
                body[result.outcome.value] = True

    except WebhookError as e:
        return await _reject(
            e, session, audit, label, org_slug, started, organization_id, payload, event_type, normalized_headers, raw_body
        )
    except Exception as e:
        # fallo no previsto: 500 genérico, la traza solo a logs
        error = WebhookError(f"Error inesperado: {type(e).__name__}")
        error.__cause__ = e
        return await _reject(
            error, session, audit, label, org_slug, started, organization_id, payload, event_type, normalized_headers, raw_body
        )

    observe_webhook_outcome(label, map_webhook_result_to_outcome(body), time.perf_counter() - started)
    await audit.record(
        provider=label,
        organization_id=organization_id,
        outcome=WebhookOutcome.SUCCESS,
        payload=payload,
        response=body,
        event_type=event_type,
        headers=normalized_headers,
        http_status=200,
        raw_body=raw_body,
    )
    return WebhookHttpResult(status_code=200, body=body)


async def _reject(
    error: WebhookError,
    session: AsyncSession,
    audit: WebhookAuditLogger,
    label: str,
    org_slug: Optional[str],
    started: float,
    organization_id: Optional[str],
    payload: Optional[Dict[str, Any]],
    event_type: Optional[str],
    headers: Mapping[str, str],
    raw_body: bytes,
) -> WebhookHttpResult:
    await _rollback_quietly(session, label)
    _log_rejection(label, org_slug, error)
    observe_webhook_rejected(label, error.reason)
    observe_webhook_outcome(label, "error", time.perf_counter() - started)
    response = {"error": error.public_message}
    await audit.record(
        provider=label,
        organization_id=organization_id,
        outcome=WebhookOutcome.ERROR,
        payload=payload,
        response=response,
        event_type=event_type,
        headers=headers,
        http_status=error.status_code,
        error_message=error.detail,
        raw_body=raw_body,
    )
    return WebhookHttpResult(status_code=error.status_code, body=response)


def _log_rejection(label: str, org_slug: Optional[str], error: WebhookError) -> None:
    message = (
        f"[webhook:{label}] Rechazado status={error.status_code} reason={error.reason} "
        f"org={org_slug or 'plataforma'} detail={error.detail}"
    )
    if error.status_code >= 500:
        # traza solo a logs, nunca al body
        logger.error(message, exc_info=error)
    elif isinstance(error, ReferenceNotFound):
        logger.error(message)
    else:
        logger.warning(message)


async def _rollback_quietly(session: AsyncSession, label: str) -> None:
    try:
        await session.rollback()
    except SQLAlchemyError as e:
        logger.error(f"[webhook:{label}] Rollback falló: {type(e).__name__}: {e}")


__all__ = ["WebhookHttpResult", "handle_payment_webhook"]

# Fin del archivo backend/app/modules/payments/facades/webhooks/handler.py
