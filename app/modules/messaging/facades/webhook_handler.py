# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/facades/webhook_handler.py

Orquestación de webhooks de WhatsApp (Evolution API y Meta Cloud).

Política de respuestas (los proveedores reintentan todo lo que no sea 2xx):
- 401 solo si hay secreto configurado y la firma no valida
- 200 con `warning` para instancia desconocida o envelope ilegible
- 500 en fallo de persistencia o secreto almacenado ilegible
- 500 genérico ante cualquier otra excepción
- Toda entrega queda registrada en webhook_logs

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.messaging.enums import MessagingProvider
from app.modules.messaging.models import WhatsAppInstance
from app.modules.messaging.repositories import WhatsAppInstanceRepository
from app.modules.messaging.services.event_normalizer import MessagingNormalizationError
from app.modules.messaging.services.messaging_event_service import MessagingEventService
from app.modules.payments.enums import WebhookOutcome
from app.modules.payments.facades.webhooks.handler import WebhookHttpResult
from app.modules.payments.metrics import (
    observe_webhook_outcome,
    observe_webhook_received,
    observe_webhook_rejected,
    observe_webhook_verified,
)
from app.modules.payments.services.webhook_audit_service import WebhookAuditLogger
from app.modules.payments.services.webhooks.errors import (
    GatewayMisconfigured,
    PersistenceFailure,
    SignatureInvalid,
    WebhookError,
)
from app.shared.config.settings_webhooks import WebhooksSettings, get_webhooks_settings
from app.shared.security.encryption import SecretDecryptionError, decrypt_secret, is_encrypted

from .providers import MESSAGING_PROVIDERS, MessagingAdapter

logger = logging.getLogger(__name__)

WARNING_INSTANCE_NOT_FOUND = "Instance not found"
WARNING_INVALID_PAYLOAD = "Invalid payload"


@dataclass
class _Delivery:
    """Estado acumulado de una entrega, para auditoría en cualquier camino."""

    payload: Optional[Dict[str, Any]] = None
    event_type: Optional[str] = None
    organization_id: Optional[str] = None
    results: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _parse_envelope(raw_body: bytes) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(raw_body) if raw_body else None
    except (ValueError, TypeError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _reveal_instance_secret(instance: WhatsAppInstance, master_key: Optional[str]) -> Optional[str]:
    stored = instance.webhook_secret_encrypted
    if not stored:
        return None
    if not is_encrypted(stored):
        return stored
    try:
        return decrypt_secret(stored, master_key or "")
    except SecretDecryptionError as e:
        raise GatewayMisconfigured(f"Secreto de la instancia {instance.instance_name} ilegible: {e}") from e


def resolve_messaging_secret(
    provider: MessagingProvider,
    instance: Optional[WhatsAppInstance],
    settings: WebhooksSettings,
) -> Optional[str]:
    """
    Evolution: secreto de la instancia si existe; si no, el de despliegue.
    Meta Cloud: META_APP_SECRET.
    """
    if provider == MessagingProvider.META_CLOUD:
        return settings.meta_app_secret
    if instance is not None:
        secret = _reveal_instance_secret(instance, settings.encryption_key)
        if secret:
            return secret
    return settings.evolution_webhook_secret


async def handle_messaging_webhook(
    session: AsyncSession,
    *,
    session_factory: async_sessionmaker[AsyncSession],
    provider: MessagingProvider,
    raw_body: bytes,
    headers: Mapping[str, str],
    service: Optional[MessagingEventService] = None,
    instance_repo: Optional[WhatsAppInstanceRepository] = None,
    audit: Optional[WebhookAuditLogger] = None,
    settings: Optional[WebhooksSettings] = None,
) -> WebhookHttpResult:
    instance_repo = instance_repo or WhatsAppInstanceRepository()
    service = service or MessagingEventService(instance_repo=instance_repo)
    audit = audit or WebhookAuditLogger(session_factory)
    settings = settings or get_webhooks_settings()

    adapter = MESSAGING_PROVIDERS[provider]
    label = provider.value
    started = time.perf_counter()
    normalized_headers = {k.lower(): v for k, v in headers.items()}
    observe_webhook_received(label)

    delivery = _Delivery()
    try:
        delivery.payload = _parse_envelope(raw_body)
        delivery.event_type = adapter.event_type(delivery.payload)
        await _process(session, adapter, delivery, raw_body, normalized_headers, instance_repo, service, settings)
    except WebhookError as e:
        return await _reject(e, session, audit, label, started, delivery, normalized_headers, raw_body)
    except Exception as e:
        # fallo no previsto: 500 genérico, la traza solo a logs
        error = WebhookError(f"Error inesperado: {type(e).__name__}")
        error.__cause__ = e
        return await _reject(error, session, audit, label, started, delivery, normalized_headers, raw_body)

    body: Dict[str, Any] = {"received": True}
    if delivery.warnings:
        body["warning"] = delivery.warnings[0]
    if delivery.results:
        body["results"] = delivery.results

    if delivery.warnings:
        outcome_label = "warning"
    elif delivery.results:
        outcome_label = "processed"
    else:
        outcome_label = "ignored"
    observe_webhook_outcome(label, outcome_label, time.perf_counter() - started)

    await audit.record(
        provider=label,
        organization_id=delivery.organization_id,
        outcome=WebhookOutcome.SUCCESS,
        payload=delivery.payload,
        response=body,
        event_type=delivery.event_type,
        headers=normalized_headers,
        http_status=200,
        error_message="; ".join(delivery.warnings) or None,
        raw_body=raw_body,
    )
    return WebhookHttpResult(status_code=200, body=body)


async def _reject(
    error: WebhookError,
    session: AsyncSession,
    audit: WebhookAuditLogger,
    label: str,
    started: float,
    delivery: _Delivery,
    headers: Mapping[str, str],
    raw_body: bytes,
) -> WebhookHttpResult:
    try:
        await session.rollback()
    except SQLAlchemyError as rollback_error:
        logger.error(f"[webhook:{label}] Rollback falló: {type(rollback_error).__name__}")
    if error.status_code >= 500:
        logger.error(f"[webhook:{label}] Rechazado reason={error.reason} detail={error.detail}", exc_info=error)
    else:
        logger.warning(f"[webhook:{label}] Rechazado reason={error.reason} detail={error.detail}")
    observe_webhook_rejected(label, error.reason)
    observe_webhook_outcome(label, "error", time.perf_counter() - started)
    response = {"error": error.public_message}
    await audit.record(
        provider=label,
        organization_id=delivery.organization_id,
        outcome=WebhookOutcome.ERROR,
        payload=delivery.payload,
        response=response,
        event_type=delivery.event_type,
        headers=headers,
        http_status=error.status_code,
        error_message=error.detail,
        raw_body=raw_body,
    )
    return WebhookHttpResult(status_code=error.status_code, body=response)


async def _process(
    session: AsyncSession,
    adapter: MessagingAdapter,
    delivery: _Delivery,
    raw_body: bytes,
    headers: Mapping[str, str],
    instance_repo: WhatsAppInstanceRepository,
    service: MessagingEventService,
    settings: WebhooksSettings,
) -> None:
    label = adapter.provider.value
    payload = delivery.payload
    is_evolution = adapter.provider == MessagingProvider.EVOLUTION

    try:
        instance: Optional[WhatsAppInstance] = None
        instance_name = payload.get("instance") if is_evolution and payload else None
        if isinstance(instance_name, str) and instance_name:
            instance = await instance_repo.get_by_instance_name(session, instance_name)
            if instance is not None:
                delivery.organization_id = instance.organization_id

        secret = resolve_messaging_secret(adapter.provider, instance, settings)
        verified = adapter.verify(raw_body, headers, secret)
        observe_webhook_verified(label, verified)
        if not verified:
            raise SignatureInvalid(f"Firma {label} inválida")

        if payload is None:
            logger.warning(f"[webhook:{label}] Envelope ilegible, se reconoce sin procesar")
            delivery.warnings.append(WARNING_INVALID_PAYLOAD)
            return

        try:
            events = adapter.normalize(payload)
        except MessagingNormalizationError as e:
            logger.warning(f"[webhook:{label}] {e}")
            delivery.warnings.append(WARNING_INVALID_PAYLOAD)
            return

        if is_evolution and instance is None:
            logger.warning(f"[webhook:{label}] Instancia no encontrada: {instance_name}")
            delivery.warnings.append(WARNING_INSTANCE_NOT_FOUND)
            return

        for event in events:
            target = instance
            if target is None:
                target = await instance_repo.get_by_phone_number_id(session, event.phone_number_id or "")
            if target is None:
                logger.warning(f"[webhook:{label}] Instancia no encontrada para phone_number_id={event.phone_number_id}")
                delivery.warnings.append(WARNING_INSTANCE_NOT_FOUND)
                continue
            delivery.organization_id = delivery.organization_id or target.organization_id
            delivery.results.append(await service.apply(session, target, event))

        await session.commit()
    except SQLAlchemyError as e:
        raise PersistenceFailure(f"Fallo de BD en webhook {label}: {type(e).__name__}") from e


__all__ = [
    "WARNING_INSTANCE_NOT_FOUND",
    "WARNING_INVALID_PAYLOAD",
    "resolve_messaging_secret",
    "handle_messaging_webhook",
]

# Fin del archivo backend/app/modules/messaging/facades/webhook_handler.py
