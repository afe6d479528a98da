# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/gateway_config_models.py

Configuración de pasarela por (organización, proveedor).

organization_id NULL = configuración de plataforma (cobro de suscripciones).
Los secretos se guardan cifrados (iv:tag:ciphertext, ver
app/shared/security/encryption.py).

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.payments.enums import PaymentProvider
from app.shared.database.base import Base, new_uuid


class PaymentGatewayConfig(Base):
    __tablename__ = "payment_gateway_configs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    organization_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    provider: Mapped[PaymentProvider] = mapped_column(
        PaymentProvider.as_db_enum(),
        nullable=False,
    )

    public_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    private_key_encrypted: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Llave privada / API key del proveedor (cifrada).",
    )

    integrity_secret_encrypted: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Wompi: secreto de eventos. ePayco: P_CUST_ID_CLIENTE (cifrado).",
    )

    encryption_key_encrypted: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="ePayco: P_KEY (cifrado).",
    )

    is_test_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "organization_id",
            "provider",
            name="uq_payment_gateway_configs_org_provider",
        ),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<PaymentGatewayConfig org={self.organization_id} provider={self.provider}>"

# Fin del archivo backend/app/modules/payments/models/gateway_config_models.py
