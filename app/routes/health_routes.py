# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

Endpoint básico de health check del servicio de webhooks.

Autor: LandingChat
Fecha: 2026-10-12
"""

from fastapi import APIRouter

from app.modules.payments.utils.datetime_helpers import utcnow
from app.shared.config.settings_webhooks import get_webhooks_settings
from app.shared.database.database import check_database_health

router = APIRouter()


@router.get(
    "/health",
    summary="Health check del servicio",
    description="Estado básico del servicio y verificación simple de conectividad a la base de datos.",
)
async def health_check() -> dict:
    settings = get_webhooks_settings()

    db_ok = await check_database_health(timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": utcnow().isoformat(),
        "environment": settings.environment,
        "database": {
            "reachable": db_ok,
        },
        "service": {
            "name": "landingchat-webhooks",
            "version": "1.0.0",
        },
    }

# Fin del archivo backend/app/routes/health_routes.py
