# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/repositories/__init__.py

Autor: LandingChat
Fecha: 2026-10-12
"""

from .whatsapp_instance_repository import WhatsAppInstanceRepository

__all__ = ["WhatsAppInstanceRepository"]

# Fin del archivo backend/app/modules/messaging/repositories/__init__.py
