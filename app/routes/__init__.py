# -*- coding: utf-8 -*-
"""
backend/app/routes/__init__.py

Ensamblador principal de ruteadores del servicio.

Responsabilidades:
- Health (/health)
- Métricas Prometheus (/metrics)
- Webhooks de pago (/webhooks/payments/{provider})
- Webhooks de WhatsApp (/webhooks/whatsapp, /webhooks/whatsapp/meta)

Autor: LandingChat
Fecha: 2026-10-12
"""

from fastapi import APIRouter

from app.modules.messaging.routes import router as messaging_router
from app.modules.payments.metrics.routes import router_prometheus
from app.modules.payments.routes import router as payments_router

from .health_routes import router as health_router

router = APIRouter()

router.include_router(health_router)
router.include_router(router_prometheus)
router.include_router(payments_router)
router.include_router(messaging_router)

__all__ = ["router"]

# Fin del archivo backend/app/routes/__init__.py
