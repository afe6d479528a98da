# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/services/messaging_event_service.py

Aplica eventos de mensajería normalizados.

- CONNECTION_UPDATE: actualiza whatsapp_instances.status con UPDATE
  condicional (compare-and-set); entregas repetidas no escriben.
- MESSAGE_RECEIVED: se entrega a un InboundMessageHandler inyectable.
  El pipeline de chat con IA vive fuera de este servicio; el handler por
  defecto solo registra el mensaje con el teléfono enmascarado.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.messaging.enums import InstanceStatus, MessagingEventKind
from app.modules.messaging.models import WhatsAppInstance
from app.modules.messaging.repositories import WhatsAppInstanceRepository
from app.modules.messaging.schemas import MessagingEvent
from app.shared.config.logging_config import mask_phone

logger = logging.getLogger(__name__)

RESULT_MESSAGE_DISPATCHED = "message_dispatched"
RESULT_STATUS_UPDATED = "status_updated"
RESULT_NO_CHANGE = "no_change"


class InboundMessageHandler(Protocol):
    """Destino de los mensajes entrantes (p. ej. el agente de chat)."""

    async def handle_message(self, instance: WhatsAppInstance, event: MessagingEvent) -> None: ...


class LoggingInboundMessageHandler:
    """Implementación que solo hace logging."""

    async def handle_message(self, instance: WhatsAppInstance, event: MessagingEvent) -> None:
        logger.info(
            "whatsapp_message_received org=%s instance=%s from=%s message_id=%s chars=%d",
            instance.organization_id,
            instance.instance_name,
            mask_phone(event.sender_phone),
            event.message_id,
            len(event.text or ""),
        )


class MessagingEventService:
    MAX_CAS_ATTEMPTS = 3

    def __init__(
        self,
        instance_repo: Optional[WhatsAppInstanceRepository] = None,
        message_handler: Optional[InboundMessageHandler] = None,
    ) -> None:
        self.instance_repo = instance_repo or WhatsAppInstanceRepository()
        self.message_handler = message_handler or LoggingInboundMessageHandler()

    async def apply(
        self,
        session: AsyncSession,
        instance: WhatsAppInstance,
        event: MessagingEvent,
    ) -> str:
        """Devuelve la etiqueta del resultado (para respuesta y métricas)."""
        if event.kind == MessagingEventKind.MESSAGE_RECEIVED:
            await self.message_handler.handle_message(instance, event)
            return RESULT_MESSAGE_DISPATCHED
        return await self._apply_connection_update(session, instance, event.connection_status)

    async def _apply_connection_update(
        self,
        session: AsyncSession,
        instance: WhatsAppInstance,
        new_status: Optional[InstanceStatus],
    ) -> str:
        if new_status is None:
            return RESULT_NO_CHANGE

        current = instance
        for attempt in range(1, self.MAX_CAS_ATTEMPTS + 1):
            expected = InstanceStatus(current.status)
            if expected == new_status:
                return RESULT_NO_CHANGE

            applied = await self.instance_repo.compare_and_set_status(
                session,
                instance_id=current.id,
                expected=expected,
                new_status=new_status,
            )
            if applied:
                logger.info(
                    "whatsapp_instance_status_updated instance=%s from=%s to=%s",
                    current.instance_name,
                    expected.value,
                    new_status.value,
                )
                return RESULT_STATUS_UPDATED

            logger.info(
                "whatsapp_instance_cas_conflict instance=%s expected=%s attempt=%d",
                current.instance_name,
                expected.value,
                attempt,
            )
            reloaded = await self.instance_repo.get_by_instance_name(session, current.instance_name)
            if reloaded is None:
                return RESULT_NO_CHANGE
            current = reloaded

        return RESULT_NO_CHANGE


__all__ = [
    "RESULT_MESSAGE_DISPATCHED",
    "RESULT_STATUS_UPDATED",
    "RESULT_NO_CHANGE",
    "InboundMessageHandler",
    "LoggingInboundMessageHandler",
    "MessagingEventService",
]

# Fin del archivo backend/app/modules/messaging/services/messaging_event_service.py
