# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/__init__.py

Superficie de exportación de enums del módulo Payments.

Autor: LandingChat
Fecha: 2026-10-12
"""

from .order_status_enum import OrderPaymentStatus, OrderStatus
from .payment_provider_enum import PaymentProvider
from .payment_status_enum import PaymentStatus
from .subscription_status_enum import BillingCycle, SubscriptionStatus
from .webhook_outcome_enum import ReconcileOutcome, WebhookOutcome

__all__ = [
    "BillingCycle",
    "OrderPaymentStatus",
    "OrderStatus",
    "PaymentProvider",
    "PaymentStatus",
    "ReconcileOutcome",
    "SubscriptionStatus",
    "WebhookOutcome",
]

# Fin del archivo backend/app/modules/payments/enums/__init__.py
