# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/__init__.py

Ensamblador de rutas del módulo Payments.

Incluye:
- POST /webhooks/payments/{provider}

Autor: LandingChat
Fecha: 2026-10-12
"""

from fastapi import APIRouter

from .webhooks_payments import router as webhooks_payments_router

router = APIRouter()
router.include_router(webhooks_payments_router)

__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/__init__.py
