# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/facades/__init__.py

Autor: LandingChat
Fecha: 2026-10-12
"""

from .providers import MESSAGING_PROVIDERS, MessagingAdapter
from .webhook_handler import handle_messaging_webhook, resolve_messaging_secret

__all__ = [
    "MESSAGING_PROVIDERS",
    "MessagingAdapter",
    "handle_messaging_webhook",
    "resolve_messaging_secret",
]

# Fin del archivo backend/app/modules/messaging/facades/__init__.py
