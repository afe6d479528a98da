# -*- coding: utf-8 -*-
"""
backend/app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import get_webhooks_settings, setup_logging
"""

from __future__ import annotations

from .logging_config import mask_phone, setup_logging
from .settings_webhooks import (
    WebhooksSettings,
    get_webhooks_settings,
    reset_webhooks_settings,
)

__all__ = [
    "WebhooksSettings",
    "get_webhooks_settings",
    "reset_webhooks_settings",
    "setup_logging",
    "mask_phone",
]

# Fin del archivo backend/app/shared/config/__init__.py
