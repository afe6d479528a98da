# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/subscription_models.py

Suscripción de plataforma de una organización.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.payments.enums import BillingCycle, SubscriptionStatus
from app.shared.database.base import Base, new_uuid


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    plan_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    status: Mapped[SubscriptionStatus] = mapped_column(
        SubscriptionStatus.as_db_enum(),
        nullable=False,
        default=SubscriptionStatus.TRIALING,
    )

    billing_cycle: Mapped[BillingCycle] = mapped_column(
        BillingCycle.as_db_enum(),
        nullable=False,
        default=BillingCycle.MONTHLY,
    )

    current_period_start: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    current_period_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

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

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<Subscription id={self.id} status={self.status}>"

# Fin del archivo backend/app/modules/payments/models/subscription_models.py
