# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/enums/__init__.py

Autor: LandingChat
Fecha: 2026-10-12
"""

from .messaging_enums import InstanceStatus, MessagingEventKind, MessagingProvider

__all__ = ["InstanceStatus", "MessagingEventKind", "MessagingProvider"]

# Fin del archivo backend/app/modules/messaging/enums/__init__.py
