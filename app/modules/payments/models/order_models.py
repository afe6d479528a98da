# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/order_models.py

Orden de tienda. La crea el checkout (fuera de este servicio); aquí solo
se mutan payment_status, status y confirmed_at vía actualización condicional.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.payments.enums import OrderPaymentStatus, OrderStatus
from app.shared.database.base import Base, new_uuid


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    order_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    payment_reference: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Referencia generada al iniciar el pago y enviada al proveedor.",
    )

    status: Mapped[OrderStatus] = mapped_column(
        OrderStatus.as_db_enum(),
        nullable=False,
        default=OrderStatus.PENDING,
    )

    payment_status: Mapped[OrderPaymentStatus] = mapped_column(
        OrderPaymentStatus.as_db_enum(),
        nullable=False,
        default=OrderPaymentStatus.PENDING,
    )

    total_minor_units: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="COP")

    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

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
            "organization_id",
            "payment_reference",
            name="uq_orders_org_payment_reference",
        ),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<Order id={self.id} payment_status={self.payment_status}>"

# Fin del archivo backend/app/modules/payments/models/order_models.py
