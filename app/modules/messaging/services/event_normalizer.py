# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/services/event_normalizer.py

Normalización de envelopes de WhatsApp a MessagingEvent.

Evolution API: `{event, instance, data}`
- messages.upsert   → MESSAGE_RECEIVED (se ignoran mensajes propios y sin texto)
- connection.update → CONNECTION_UPDATE
- qrcode.updated y eventos desconocidos → [] (se reconocen con 200)

Meta Cloud: `{object, entry[].changes[].value}`
- value.messages[] de tipo texto → MESSAGE_RECEIVED, instancia por
  metadata.phone_number_id

Ambos normalizadores devuelven una lista (Meta agrupa varios mensajes en
una sola entrega).

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from app.modules.messaging.enums import InstanceStatus, MessagingEventKind, MessagingProvider
from app.modules.messaging.schemas import MessagingEvent
from app.modules.payments.utils.datetime_helpers import parse_provider_timestamp

logger = logging.getLogger(__name__)


class MessagingNormalizationError(ValueError):
    """Envelope sin la forma mínima esperada."""


EVOLUTION_EVENT_MESSAGES_UPSERT = "messages.upsert"
EVOLUTION_EVENT_CONNECTION_UPDATE = "connection.update"
EVOLUTION_EVENT_QRCODE_UPDATED = "qrcode.updated"

WHATSAPP_JID_SUFFIX = "@s.whatsapp.net"

CONNECTION_STATE_MAP: Dict[str, InstanceStatus] = {
    "open": InstanceStatus.CONNECTED,
    "close": InstanceStatus.DISCONNECTED,
    "closed": InstanceStatus.DISCONNECTED,
    "connecting": InstanceStatus.CONNECTING,
}

META_OBJECT_WHATSAPP = "whatsapp_business_account"


def map_connection_state(state: Any) -> InstanceStatus:
    """Estados no reconocidos cuentan como desconectado."""
    return CONNECTION_STATE_MAP.get(str(state or "").strip().lower(), InstanceStatus.DISCONNECTED)


def _extract_connection_state(data: Mapping[str, Any]) -> Optional[str]:
    # Evolution v2 envía el estado en ubicaciones distintas según versión
    if isinstance(data.get("state"), str):
        return data["state"]
    if isinstance(data.get("status"), str):
        return data["status"]
    connection = data.get("connection")
    if isinstance(connection, Mapping) and isinstance(connection.get("state"), str):
        return connection["state"]
    return None


def _extract_evolution_text(message: Any) -> str:
    if not isinstance(message, Mapping):
        return ""
    if isinstance(message.get("conversation"), str) and message["conversation"]:
        return message["conversation"]
    extended = message.get("extendedTextMessage")
    if isinstance(extended, Mapping) and isinstance(extended.get("text"), str):
        return extended["text"]
    return ""


# =============================================================================
# EVOLUTION API
# =============================================================================

def normalize_evolution(payload: Mapping[str, Any]) -> List[MessagingEvent]:
    """
    Raises:
        MessagingNormalizationError: envelope sin `event` o sin `instance`.
    """
    event = payload.get("event")
    instance = payload.get("instance")
    if not isinstance(event, str) or not isinstance(instance, str) or not instance:
        raise MessagingNormalizationError("Envelope Evolution sin event/instance")

    data = payload.get("data")
    if not isinstance(data, Mapping):
        data = payload

    if event == EVOLUTION_EVENT_MESSAGES_UPSERT:
        return _normalize_evolution_message(instance, data)

    if event == EVOLUTION_EVENT_CONNECTION_UPDATE:
        state = _extract_connection_state(data)
        if state is None:
            logger.warning("evolution_connection_update_without_state instance=%s", instance)
            return []
        return [
            MessagingEvent(
                provider=MessagingProvider.EVOLUTION,
                kind=MessagingEventKind.CONNECTION_UPDATE,
                instance_name=instance,
                connection_status=map_connection_state(state),
                occurred_at=parse_provider_timestamp(payload.get("date_time")),
            )
        ]

    logger.info("evolution_event_acknowledged event=%s instance=%s", event, instance)
    return []


def _normalize_evolution_message(instance: str, data: Mapping[str, Any]) -> List[MessagingEvent]:
    key = data.get("key")
    if not isinstance(key, Mapping) or not isinstance(key.get("remoteJid"), str):
        logger.warning("evolution_message_invalid instance=%s", instance)
        return []
    if key.get("fromMe") is True:
        return []

    text = _extract_evolution_text(data.get("message"))
    if not text:
        logger.debug("evolution_message_without_text instance=%s", instance)
        return []

    return [
        MessagingEvent(
            provider=MessagingProvider.EVOLUTION,
            kind=MessagingEventKind.MESSAGE_RECEIVED,
            instance_name=instance,
            sender_phone=key["remoteJid"].replace(WHATSAPP_JID_SUFFIX, ""),
            sender_name=data.get("pushName") if isinstance(data.get("pushName"), str) else None,
            message_id=str(key.get("id") or ""),
            text=text,
            occurred_at=parse_provider_timestamp(data.get("messageTimestamp")),
        )
    ]


# =============================================================================
# META CLOUD
# =============================================================================

def normalize_meta_cloud(payload: Mapping[str, Any]) -> List[MessagingEvent]:
    """
    Raises:
        MessagingNormalizationError: `entry` ausente o con forma inválida.
    """
    if payload.get("object") != META_OBJECT_WHATSAPP:
        logger.info("meta_event_acknowledged object=%s", payload.get("object"))
        return []

    entries = payload.get("entry")
    if not isinstance(entries, list):
        raise MessagingNormalizationError("Notificación Meta sin entry[]")

    events: List[MessagingEvent] = []
    for entry in entries:
        changes = entry.get("changes") if isinstance(entry, Mapping) else None
        for change in changes or []:
            if not isinstance(change, Mapping) or change.get("field") != "messages":
                continue
            value = change.get("value")
            if isinstance(value, Mapping):
                events.extend(_normalize_meta_value(value))
    return events


def _normalize_meta_value(value: Mapping[str, Any]) -> List[MessagingEvent]:
    metadata = value.get("metadata")
    phone_number_id = metadata.get("phone_number_id") if isinstance(metadata, Mapping) else None
    if not phone_number_id:
        logger.warning("meta_change_without_phone_number_id")
        return []

    names: Dict[str, str] = {}
    for contact in value.get("contacts") or []:
        if isinstance(contact, Mapping) and isinstance(contact.get("profile"), Mapping):
            names[str(contact.get("wa_id"))] = contact["profile"].get("name")

    events: List[MessagingEvent] = []
    for message in value.get("messages") or []:
        if not isinstance(message, Mapping) or message.get("type") != "text":
            continue
        text = message.get("text")
        body = text.get("body") if isinstance(text, Mapping) else None
        if not body:
            continue
        sender = str(message.get("from") or "")
        events.append(
            MessagingEvent(
                provider=MessagingProvider.META_CLOUD,
                kind=MessagingEventKind.MESSAGE_RECEIVED,
                phone_number_id=str(phone_number_id),
                sender_phone=sender,
                sender_name=names.get(sender),
                message_id=str(message.get("id") or ""),
                text=body,
                occurred_at=parse_provider_timestamp(message.get("timestamp")),
            )
        )
    return events


__all__ = [
    "MessagingNormalizationError",
    "EVOLUTION_EVENT_MESSAGES_UPSERT",
    "EVOLUTION_EVENT_CONNECTION_UPDATE",
    "EVOLUTION_EVENT_QRCODE_UPDATED",
    "CONNECTION_STATE_MAP",
    "map_connection_state",
    "normalize_evolution",
    "normalize_meta_cloud",
]

# Fin del archivo backend/app/modules/messaging/services/event_normalizer.py
