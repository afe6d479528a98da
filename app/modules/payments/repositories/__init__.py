# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/__init__.py

Repositorios del módulo Payments.

Autor: LandingChat
Fecha: 2026-10-12
"""

from .gateway_config_repository import GatewayConfigRepository, OrganizationRepository
from .order_repository import OrderRepository
from .subscription_repository import SubscriptionRepository
from .transaction_repository import LedgerUpsertResult, TransactionRepository
from .webhook_log_repository import WebhookLogRepository

__all__ = [
    "GatewayConfigRepository",
    "OrganizationRepository",
    "OrderRepository",
    "SubscriptionRepository",
    "LedgerUpsertResult",
    "TransactionRepository",
    "WebhookLogRepository",
]

# Fin del archivo backend/app/modules/payments/repositories/__init__.py
