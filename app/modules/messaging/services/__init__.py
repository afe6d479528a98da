# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/services/__init__.py

Autor: LandingChat
Fecha: 2026-10-12
"""

from .event_normalizer import (
    MessagingNormalizationError,
    map_connection_state,
    normalize_evolution,
    normalize_meta_cloud,
)
from .messaging_event_service import (
    InboundMessageHandler,
    LoggingInboundMessageHandler,
    MessagingEventService,
)

__all__ = [
    "MessagingNormalizationError",
    "map_connection_state",
    "normalize_evolution",
    "normalize_meta_cloud",
    "InboundMessageHandler",
    "LoggingInboundMessageHandler",
    "MessagingEventService",
]

# Fin del archivo backend/app/modules/messaging/services/__init__.py
