# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/webhook_log_models.py

Bitácora append-only de webhooks recibidos (pagos y mensajería).
La consume el dashboard de operaciones (solo lectura).

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.payments.enums import WebhookOutcome
from app.shared.database.base import Base, JSONType, new_uuid


class WebhookLog(Base):
    __tablename__ = "webhook_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    # sin FK: el log debe poder escribirse aunque la organización no exista
    organization_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    provider: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    event_type: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    outcome: Mapped[WebhookOutcome] = mapped_column(
        WebhookOutcome.as_db_enum(),
        nullable=False,
    )

    http_status: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    payload: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    headers: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    response: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    payload_hash: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<WebhookLog id={self.id} provider={self.provider} outcome={self.outcome}>"

# Fin del archivo backend/app/modules/payments/models/webhook_log_models.py
