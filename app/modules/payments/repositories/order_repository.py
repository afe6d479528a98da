# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/order_repository.py

Repositorio de órdenes: búsqueda por referencia de pago y transición
condicional (compare-and-swap sobre payment_status).

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import OrderPaymentStatus, OrderStatus
from app.modules.payments.enums.state_transitions import TERMINAL_ORDER_STATUSES
from app.modules.payments.models import Order
from app.modules.payments.utils.datetime_helpers import utcnow
from app.shared.database.repository import BaseRepository


class OrderRepository(BaseRepository[Order]):
    def __init__(self) -> None:
        super().__init__(Order)

    async def get_for_update_check(
        self,
        session: AsyncSession,
        order_id: str,
        organization_id: str,
    ) -> Optional[Order]:
        """Lee la orden descartando lo que haya en el identity map."""
        stmt = (
            select(Order)
            .where(Order.id == order_id, Order.organization_id == organization_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_payment_reference(
        self,
        session: AsyncSession,
        organization_id: str,
        payment_reference: str,
    ) -> Optional[Order]:
        stmt = select(Order).where(
            Order.organization_id == organization_id,
            Order.payment_reference == payment_reference,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def compare_and_set_payment_status(
        self,
        session: AsyncSession,
        *,
        order_id: str,
        organization_id: str,
        expected: OrderPaymentStatus,
        new_status: OrderPaymentStatus,
        confirm: bool = False,
    ) -> bool:
        """
        UPDATE condicional: solo aplica si payment_status sigue siendo `expected`
        y no es terminal (paid, failed).

        confirm=True además estampa status=confirmed (si seguía pending) y
        confirmed_at (si no estaba fijado).

        Returns:
            True si esta llamada aplicó la transición.
        """
        if expected in TERMINAL_ORDER_STATUSES:
            return False

        now = utcnow()
        values = {"payment_status": new_status, "updated_at": now}
        if confirm:
            values["status"] = case(
                (Order.status == OrderStatus.PENDING, OrderStatus.CONFIRMED),
                else_=Order.status,
            )
            values["confirmed_at"] = func.coalesce(Order.confirmed_at, now)

        stmt = (
            update(Order)
            .where(
                Order.id == order_id,
                Order.organization_id == organization_id,
                Order.payment_status == expected,
                Order.payment_status.not_in(list(TERMINAL_ORDER_STATUSES)),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1


__all__ = ["OrderRepository"]

# Fin del archivo backend/app/modules/payments/repositories/order_repository.py
