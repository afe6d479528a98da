# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/webhooks_payments.py

Webhook unificado de pasarelas de pago.

POST /webhooks/payments/{provider}?org={slug}
- provider: wompi | epayco (meta_cloud y desconocidos → 404)
- org ausente: configuración de plataforma (suscripciones de la plataforma)

Respuestas:
- 200 {"received": true, ...}
- 401 {"error": "Invalid signature"}
- 400 payload mal formado / referencia inexistente / pasarela sin configurar
- 404 organización o proveedor desconocido
- 500 fallo de persistencia (el proveedor reintenta)

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.payments.facades.webhooks import handle_payment_webhook
from app.shared.database.database import get_db, get_session_factory

router = APIRouter(
    prefix="/webhooks",
    tags=["payments:webhooks"],
)


@router.post("/payments/{provider}")
async def payment_webhook(
    provider: str,
    request: Request,
    org: Optional[str] = Query(default=None, description="Slug de la organización"),
    session: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> JSONResponse:
    """
    Recibe el webhook crudo: la firma se calcula sobre los bytes tal como
    llegaron, así que el body no se parsea antes de verificar.
    """
    raw_body = await request.body()
    result = await handle_payment_webhook(
        session,
        session_factory=session_factory,
        provider_name=provider,
        org_slug=org,
        raw_body=raw_body,
        headers=dict(request.headers),
    )
    return JSONResponse(status_code=result.status_code, content=result.body)


__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/webhooks_payments.py
