# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/transaction_models.py

Ledger de transacciones de pasarela (payment_transactions).

Una fila por (provider, provider_transaction_id): se crea al primer
avistamiento y se actualiza (nunca se duplica) en avistamientos
posteriores. completed_at se fija una sola vez, al entrar en APPROVED.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.payments.enums import PaymentProvider, PaymentStatus
from app.shared.database.base import Base, JSONType, new_uuid


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"

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

    provider_transaction_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="ID de la transacción en el proveedor (llave de idempotencia).",
    )

    provider_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)

    order_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    subscription_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("subscriptions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status: Mapped[PaymentStatus] = mapped_column(
        PaymentStatus.as_db_enum(),
        nullable=False,
        default=PaymentStatus.PENDING,
    )

    amount_minor_units: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="COP")

    payment_method: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    raw_response: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "provider",
            "provider_transaction_id",
            name="uq_payment_transactions_provider_tx",
        ),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return (
            f"<PaymentTransaction id={self.id} provider={self.provider} "
            f"tx={self.provider_transaction_id} status={self.status}>"
        )

# Fin del archivo backend/app/modules/payments/models/transaction_models.py
