# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/__init__.py

Punto de entrada de modelos ORM del módulo Payments.

- Organization
- PaymentGatewayConfig
- PaymentTransaction (ledger)
- Order
- Subscription
- WebhookLog

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from .organization_models import Organization
from .gateway_config_models import PaymentGatewayConfig
from .order_models import Order
from .subscription_models import Subscription
from .transaction_models import PaymentTransaction
from .webhook_log_models import WebhookLog

__all__ = [
    "Organization",
    "PaymentGatewayConfig",
    "PaymentTransaction",
    "Order",
    "Subscription",
    "WebhookLog",
]

# Fin del archivo backend/app/modules/payments/models/__init__.py
