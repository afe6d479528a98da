# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/repositories/whatsapp_instance_repository.py

Repositorio de instancias de WhatsApp.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.messaging.enums import InstanceStatus
from app.modules.messaging.models import WhatsAppInstance
from app.modules.payments.utils.datetime_helpers import utcnow
from app.shared.database.repository import BaseRepository


class WhatsAppInstanceRepository(BaseRepository[WhatsAppInstance]):
    def __init__(self) -> None:
        super().__init__(WhatsAppInstance)

    async def get_by_instance_name(self, session: AsyncSession, instance_name: str) -> Optional[WhatsAppInstance]:
        stmt = (
            select(WhatsAppInstance)
            .where(WhatsAppInstance.instance_name == instance_name)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_phone_number_id(self, session: AsyncSession, phone_number_id: str) -> Optional[WhatsAppInstance]:
        stmt = (
            select(WhatsAppInstance)
            .where(WhatsAppInstance.meta_phone_number_id == phone_number_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def compare_and_set_status(
        self,
        session: AsyncSession,
        *,
        instance_id: str,
        expected: InstanceStatus,
        new_status: InstanceStatus,
        now: Optional[datetime] = None,
    ) -> bool:
        """
        UPDATE condicional sobre status. Al conectar estampa connected_at;
        cualquier otro estado lo limpia.

        Returns:
            True si esta llamada aplicó el cambio.
        """
        now = now or utcnow()
        stmt = (
            update(WhatsAppInstance)
            .where(
                WhatsAppInstance.id == instance_id,
                WhatsAppInstance.status == expected,
            )
            .values(
                status=new_status,
                connected_at=now if new_status == InstanceStatus.CONNECTED else None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1


__all__ = ["WhatsAppInstanceRepository"]

# Fin del archivo backend/app/modules/messaging/repositories/whatsapp_instance_repository.py
