# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/routes/__init__.py

Ensamblador de rutas del módulo Messaging.

Autor: LandingChat
Fecha: 2026-10-12
"""

from fastapi import APIRouter

from .webhooks_whatsapp import router as webhooks_whatsapp_router

router = APIRouter()
router.include_router(webhooks_whatsapp_router)

__all__ = ["router"]

# Fin del archivo backend/app/modules/messaging/routes/__init__.py
