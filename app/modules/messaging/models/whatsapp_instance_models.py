# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/models/whatsapp_instance_models.py

Instancia de WhatsApp de una organización.

- Evolution: se identifica por `instance_name` (campo `instance` del envelope).
- Meta Cloud: se identifica por `meta_phone_number_id`.

`webhook_secret_encrypted` es opcional: sin él aplica el secreto de
despliegue (EVOLUTION_WEBHOOK_SECRET) y, si tampoco existe, no se exige firma.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.messaging.enums import InstanceStatus, MessagingProvider
from app.shared.database.base import Base, new_uuid


class WhatsAppInstance(Base):
    __tablename__ = "whatsapp_instances"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    instance_name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)

    provider: Mapped[MessagingProvider] = mapped_column(
        MessagingProvider.as_db_enum(),
        nullable=False,
        default=MessagingProvider.EVOLUTION,
    )

    meta_phone_number_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        unique=True,
    )

    status: Mapped[InstanceStatus] = mapped_column(
        InstanceStatus.as_db_enum(),
        nullable=False,
        default=InstanceStatus.DISCONNECTED,
    )

    webhook_secret_encrypted: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    connected_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<WhatsAppInstance name={self.instance_name} status={self.status}>"

# Fin del archivo backend/app/modules/messaging/models/whatsapp_instance_models.py
