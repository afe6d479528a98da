# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/models/__init__.py

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from .whatsapp_instance_models import WhatsAppInstance

__all__ = ["WhatsAppInstance"]

# Fin del archivo backend/app/modules/messaging/models/__init__.py
