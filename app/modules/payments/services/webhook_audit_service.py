# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhook_audit_service.py

Registro durable y best-effort de cada webhook recibido (webhook_logs).

- Escribe en su propia sesión/transacción: el registro sobrevive al
  rollback de la conciliación (p. ej. en un 500).
- Su propio fallo nunca interrumpe el flujo principal: se loguea y se descarta.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.payments.enums import WebhookOutcome
from app.modules.payments.repositories import WebhookLogRepository

from .webhooks.payload_sanitizer import (
    compute_payload_hash,
    sanitize_headers,
    sanitize_webhook_payload,
)

logger = logging.getLogger(__name__)


class WebhookAuditLogger:
    """
    Logger de auditoría para webhooks de pagos y mensajería.

    Uso:
        audit = WebhookAuditLogger(session_factory)
        await audit.record(provider="wompi", organization_id=None,
                           outcome=WebhookOutcome.SUCCESS,
                           payload=payload, response={"received": True})
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        repo: Optional[WebhookLogRepository] = None,
    ) -> None:
        self.session_factory = session_factory
        self.repo = repo or WebhookLogRepository()

    async def record(
        self,
        *,
        provider: str,
        organization_id: Optional[str],
        outcome: WebhookOutcome,
        payload: Optional[Mapping[str, Any]],
        response: Optional[Mapping[str, Any]],
        event_type: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        http_status: Optional[int] = None,
        error_message: Optional[str] = None,
        raw_body: Optional[bytes] = None,
    ) -> None:
        """Persiste el registro; nunca lanza."""
        try:
            payload_hash = compute_payload_hash(raw_body) if raw_body else (
                compute_payload_hash(dict(payload)) if payload else None
            )
            async with self.session_factory() as session:
                await self.repo.append(
                    session,
                    organization_id=organization_id,
                    provider=str(provider),
                    event_type=event_type,
                    outcome=outcome,
                    http_status=http_status,
                    payload=sanitize_webhook_payload(payload),
                    headers=sanitize_headers(headers),
                    response=dict(response) if response is not None else None,
                    payload_hash=payload_hash,
                    error_message=error_message,
                )
                await session.commit()
        except Exception as e:  # best-effort: la auditoría no debe tumbar el webhook
            logger.error(
                f"[webhook_audit] No se pudo registrar webhook provider={provider} "
                f"outcome={outcome}: {type(e).__name__}: {e}"
            )


__all__ = ["WebhookAuditLogger"]

# Fin del archivo backend/app/modules/payments/services/webhook_audit_service.py
