# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/subscription_repository.py

Repositorio de suscripciones.

- Búsqueda por prefijo de id (referencias SUB-{id8}-...)
- Transición condicional sobre (status, current_period_end): dos pagos
  aprobados concurrentes no pueden extender el periodo desde el mismo
  current_period_end

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import String, cast, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import SubscriptionStatus
from app.modules.payments.enums.state_transitions import TERMINAL_SUBSCRIPTION_STATUSES
from app.modules.payments.models import Subscription
from app.modules.payments.utils.datetime_helpers import utcnow
from app.shared.database.repository import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    def __init__(self) -> None:
        super().__init__(Subscription)

    async def get_for_update_check(
        self,
        session: AsyncSession,
        subscription_id: str,
        organization_id: Optional[str] = None,
    ) -> Optional[Subscription]:
        stmt = select(Subscription).where(Subscription.id == subscription_id)
        if organization_id is not None:
            stmt = stmt.where(Subscription.organization_id == organization_id)
        stmt = stmt.execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_id_prefix(
        self,
        session: AsyncSession,
        id_prefix: str,
        organization_id: Optional[str] = None,
        limit: int = 10,
    ) -> Sequence[Subscription]:
        """
        Candidatas cuyo id empieza con `id_prefix` (hex, sin comodines).

        El llamador debe confirmar el match exacto: el prefijo no es único.
        """
        stmt = select(Subscription).where(
            cast(Subscription.id, String).like(f"{id_prefix.lower()}%")
        )
        if organization_id is not None:
            stmt = stmt.where(Subscription.organization_id == organization_id)
        stmt = stmt.order_by(Subscription.id).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def compare_and_set_status(
        self,
        session: AsyncSession,
        *,
        subscription_id: str,
        expected_status: SubscriptionStatus,
        expected_period_end: Optional[datetime],
        new_status: SubscriptionStatus,
        period_start: Optional[datetime] = None,
        period_end: Optional[datetime] = None,
    ) -> bool:
        """
        UPDATE condicional sobre (status, current_period_end). Una suscripción
        cancelada no se toca.

        Returns:
            True si esta llamada aplicó la transición.
        """
        if expected_status in TERMINAL_SUBSCRIPTION_STATUSES:
            return False

        values = {"status": new_status, "updated_at": utcnow()}
        if period_start is not None:
            values["current_period_start"] = period_start
        if period_end is not None:
            values["current_period_end"] = period_end

        stmt = (
            update(Subscription)
            .where(
                Subscription.id == subscription_id,
                Subscription.status == expected_status,
                Subscription.status.not_in(list(TERMINAL_SUBSCRIPTION_STATUSES)),
                Subscription.current_period_end.is_not_distinct_from(expected_period_end),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1


__all__ = ["SubscriptionRepository"]

# Fin del archivo backend/app/modules/payments/repositories/subscription_repository.py
