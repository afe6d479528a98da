# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/subscription_status_enum.py

Estado y ciclo de facturación de suscripciones de plataforma.

Autor: LandingChat
Fecha: 2026-10-12
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class SubscriptionStatus(StrEnum):
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELLED = "cancelled"

    __db_enum_name__ = "subscription_status_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)


class BillingCycle(StrEnum):
    MONTHLY = "monthly"
    YEARLY = "yearly"

    __db_enum_name__ = "billing_cycle_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)

    @property
    def months(self) -> int:
        return 12 if self is BillingCycle.YEARLY else 1


__all__ = ["SubscriptionStatus", "BillingCycle"]

# Fin del archivo backend/app/modules/payments/enums/subscription_status_enum.py
