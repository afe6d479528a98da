# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/enums/messaging_enums.py

Enums del módulo de mensajería.

Autor: LandingChat
Fecha: 2026-10-12
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class MessagingProvider(StrEnum):
    EVOLUTION = "evolution"
    META_CLOUD = "meta_cloud"

    __db_enum_name__ = "messaging_provider_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)


class InstanceStatus(StrEnum):
    """Estado de conexión de una instancia de WhatsApp."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"

    __db_enum_name__ = "whatsapp_instance_status_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)


class MessagingEventKind(StrEnum):
    MESSAGE_RECEIVED = "message_received"
    CONNECTION_UPDATE = "connection_update"


__all__ = ["MessagingProvider", "InstanceStatus", "MessagingEventKind"]

# Fin del archivo backend/app/modules/messaging/enums/messaging_enums.py
