# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/webhook_log_repository.py

Repositorio append-only de webhook_logs.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.models import WebhookLog
from app.shared.database.repository import BaseRepository


class WebhookLogRepository(BaseRepository[WebhookLog]):
    def __init__(self) -> None:
        super().__init__(WebhookLog)

    async def append(self, session: AsyncSession, **fields) -> WebhookLog:
        return await self.create(session, **fields)


__all__ = ["WebhookLogRepository"]

# Fin del archivo backend/app/modules/payments/repositories/webhook_log_repository.py
