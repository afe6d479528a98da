# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/__init__.py

Exporta las funciones clave de facades/webhooks.

Autor: LandingChat
Fecha: 2026-10-12
"""

from .providers import (
    PAYMENT_PROVIDERS,
    ProviderAdapter,
    allow_insecure_webhooks,
    get_payment_adapter,
)
from .handler import WebhookHttpResult, handle_payment_webhook

__all__ = [
    "PAYMENT_PROVIDERS",
    "ProviderAdapter",
    "allow_insecure_webhooks",
    "get_payment_adapter",
    "WebhookHttpResult",
    "handle_payment_webhook",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/__init__.py
