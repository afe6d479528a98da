# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/transaction_repository.py

Repositorio del ledger payment_transactions.

Responsabilidades:
- Upsert atómico por (provider, provider_transaction_id): un solo
  INSERT ... ON CONFLICT DO UPDATE ... RETURNING, sin "select y luego insert"
- Búsquedas acotadas por proveedor + transacción (+ organización)

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy import and_, case, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import PaymentProvider, PaymentStatus
from app.modules.payments.enums.state_transitions import LEDGER_STATUS_TRANSITIONS
from app.modules.payments.models import PaymentTransaction
from app.modules.payments.schemas import PaymentEvent
from app.modules.payments.utils.datetime_helpers import utcnow
from app.shared.database.base import new_uuid
from app.shared.database.repository import BaseRepository


@dataclass(frozen=True)
class LedgerUpsertResult:
    """
    changed=True: la fila se insertó o su estado avanzó en esta llamada.
    changed=False: redelivery (mismo estado) o estado que el ledger no acepta.
    """

    row_id: str
    status: PaymentStatus
    changed: bool


def _dialect_insert(session: AsyncSession) -> Callable[..., Any]:
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise NotImplementedError(f"Upsert no soportado para el dialecto '{dialect}'")


class TransactionRepository(BaseRepository[PaymentTransaction]):
    def __init__(self) -> None:
        super().__init__(PaymentTransaction)

    # -----------------------------------------------------------
    # Lecturas acotadas
    # -----------------------------------------------------------
    async def get_by_provider_tx(
        self,
        session: AsyncSession,
        provider: PaymentProvider,
        provider_transaction_id: str,
        organization_id: Optional[str],
    ) -> Optional[PaymentTransaction]:
        stmt = (
            select(PaymentTransaction)
            .where(
                PaymentTransaction.provider == provider,
                PaymentTransaction.provider_transaction_id == provider_transaction_id,
                PaymentTransaction.organization_id.is_not_distinct_from(organization_id),
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def find_by_provider_tx(
        self,
        session: AsyncSession,
        provider: PaymentProvider,
        provider_transaction_id: str,
    ) -> Optional[PaymentTransaction]:
        """Acotada por (provider, provider_transaction_id), que es único globalmente."""
        stmt = select(PaymentTransaction).where(
            PaymentTransaction.provider == provider,
            PaymentTransaction.provider_transaction_id == provider_transaction_id,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    # -----------------------------------------------------------
    # Upsert atómico
    # -----------------------------------------------------------
    async def upsert_from_event(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        *,
        organization_id: Optional[str],
        order_id: Optional[str] = None,
        subscription_id: Optional[str] = None,
    ) -> Optional[LedgerUpsertResult]:
        """
        Inserta o avanza la fila del ledger para `event`.

        En conflicto solo actualiza si el nuevo estado es una transición
        permitida del ledger (LEDGER_STATUS_TRANSITIONS) y la fila pertenece a
        la misma organización. status, raw_response, updated_at y
        completed_at (una sola vez, al aprobarse) se actualizan juntos.

        Returns:
            LedgerUpsertResult, o None si la fila existente pertenece a otra
            organización.
        """
        now = utcnow()
        table = PaymentTransaction.__table__
        insert_fn = _dialect_insert(session)

        stmt = insert_fn(table).values(
            id=new_uuid(),
            organization_id=organization_id,
            provider=event.provider,
            provider_transaction_id=event.provider_transaction_id,
            provider_reference=event.provider_reference or None,
            order_id=order_id,
            subscription_id=subscription_id,
            status=event.status,
            amount_minor_units=event.amount_minor_units,
            currency=event.currency,
            payment_method=event.payment_method,
            raw_response=event.raw_payload,
            completed_at=now if event.status == PaymentStatus.APPROVED else None,
            created_at=now,
            updated_at=now,
        )

        current = table.c.status
        incoming = stmt.excluded.status
        next_status = case(
            *[
                (and_(current == source, incoming.in_(list(targets))), incoming)
                for source, targets in LEDGER_STATUS_TRANSITIONS.items()
                if targets
            ],
            else_=current,
        )

        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.provider, table.c.provider_transaction_id],
            set_={
                "status": next_status,
                "raw_response": stmt.excluded.raw_response,
                "updated_at": stmt.excluded.updated_at,
                "completed_at": func.coalesce(table.c.completed_at, stmt.excluded.completed_at),
            },
            where=and_(
                next_status != current,
                table.c.organization_id.is_not_distinct_from(stmt.excluded.organization_id),
            ),
        ).returning(table.c.id, table.c.status)

        row = (await session.execute(stmt)).first()
        if row is not None:
            return LedgerUpsertResult(row_id=row.id, status=PaymentStatus(row.status), changed=True)

        existing = await self.get_by_provider_tx(
            session,
            event.provider,
            event.provider_transaction_id,
            organization_id,
        )
        if existing is None:
            return None
        return LedgerUpsertResult(row_id=existing.id, status=PaymentStatus(existing.status), changed=False)


__all__ = ["TransactionRepository", "LedgerUpsertResult"]

# Fin del archivo backend/app/modules/payments/repositories/transaction_repository.py
