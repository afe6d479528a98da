# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/routes/webhooks_whatsapp.py

Webhooks de WhatsApp.

- POST /webhooks/whatsapp        → Evolution API
- GET  /webhooks/whatsapp        → sonda de vida para el proveedor
- GET  /webhooks/whatsapp/meta   → handshake de verificación de Meta Cloud
- POST /webhooks/whatsapp/meta   → notificaciones de Meta Cloud

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.messaging.enums import MessagingProvider
from app.modules.messaging.facades import handle_messaging_webhook
from app.modules.payments.services.webhooks.signature_verification import constant_time_equals
from app.shared.config.settings_webhooks import get_webhooks_settings
from app.shared.database.database import get_db, get_session_factory

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/webhooks/whatsapp",
    tags=["messaging:webhooks"],
)


@router.post("")
async def evolution_webhook(
    request: Request,
    session: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> JSONResponse:
    result = await handle_messaging_webhook(
        session,
        session_factory=session_factory,
        provider=MessagingProvider.EVOLUTION,
        raw_body=await request.body(),
        headers=dict(request.headers),
    )
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get("")
async def evolution_webhook_probe() -> Dict[str, Any]:
    return {"status": "ok", "service": "whatsapp-webhook"}


@router.get("/meta")
async def meta_verification(
    mode: Optional[str] = Query(default=None, alias="hub.mode"),
    verify_token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
) -> PlainTextResponse:
    """Meta espera el challenge de vuelta como texto plano."""
    if mode != "subscribe" or not verify_token or not challenge:
        return PlainTextResponse("Missing parameters", status_code=400)

    expected = get_webhooks_settings().meta_verify_token
    if not expected:
        logger.error("[webhook:meta_cloud] META_VERIFY_TOKEN no configurado")
        return PlainTextResponse("Not configured", status_code=500)

    if not constant_time_equals(verify_token, expected):
        logger.warning("[webhook:meta_cloud] Token de verificación inválido")
        return PlainTextResponse("Invalid verify token", status_code=403)

    logger.info("[webhook:meta_cloud] Verificación exitosa")
    return PlainTextResponse(challenge, status_code=200)


@router.post("/meta")
async def meta_webhook(
    request: Request,
    session: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> JSONResponse:
    result = await handle_messaging_webhook(
        session,
        session_factory=session_factory,
        provider=MessagingProvider.META_CLOUD,
        raw_body=await request.body(),
        headers=dict(request.headers),
    )
    return JSONResponse(status_code=result.status_code, content=result.body)


__all__ = ["router"]

# Fin del archivo backend/app/modules/messaging/routes/webhooks_whatsapp.py
