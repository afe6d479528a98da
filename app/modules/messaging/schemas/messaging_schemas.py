# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/schemas/messaging_schemas.py

Evento de mensajería normalizado, independiente del proveedor.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.modules.messaging.enums import InstanceStatus, MessagingEventKind, MessagingProvider


class MessagingEvent(BaseModel):
    """
    - MESSAGE_RECEIVED: sender_phone, message_id y text presentes.
    - CONNECTION_UPDATE: connection_status presente.

    La instancia se identifica por `instance_name` (Evolution) o por
    `phone_number_id` (Meta Cloud).
    """

    model_config = ConfigDict(frozen=True)

    provider: MessagingProvider
    kind: MessagingEventKind
    instance_name: Optional[str] = None
    phone_number_id: Optional[str] = None
    sender_phone: Optional[str] = None
    sender_name: Optional[str] = None
    message_id: Optional[str] = None
    text: Optional[str] = None
    connection_status: Optional[InstanceStatus] = None
    occurred_at: Optional[datetime] = None


__all__ = ["MessagingEvent"]

# Fin del archivo backend/app/modules/messaging/schemas/messaging_schemas.py
