# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/reconciliation_service.py

Conciliación idempotente de eventos de pago.

Flujo de reconcile(event):
1. Resolver la entidad dueña (orden o suscripción) a partir de la referencia.
   Solo lecturas: una referencia inválida no deja fila huérfana en el ledger.
2. Upsert atómico del ledger por (provider, provider_transaction_id).
   Si la fila no cambió (redelivery o estado que el ledger no acepta), no hay
   transición de dominio.
3. Calcular el estado destino con las tablas de state_transitions.
4. Aplicar con UPDATE condicional (compare-and-swap). Si otro proceso movió
   la entidad entre la lectura y la escritura, se relee y se reintenta; al
   agotar intentos el evento se reconoce sin transición.

Todo ocurre en la transacción de la sesión recibida; el commit/rollback es
del llamador. Un fallo de BD se traduce a PersistenceFailure (→ 500, el
proveedor reintenta).

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import (
    OrderPaymentStatus,
    PaymentStatus,
    ReconcileOutcome,
    SubscriptionStatus,
)
from app.modules.payments.enums.state_transitions import (
    IGNORED_REGRESSION,
    NO_OP,
    resolve_order_transition,
    resolve_subscription_transition,
)
from app.modules.payments.metrics import observe_reconcile_transition
from app.modules.payments.repositories import (
    LedgerUpsertResult,
    OrderRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from app.modules.payments.schemas import PaymentEvent, ReconcileResult
from app.modules.payments.utils.datetime_helpers import add_months, ensure_utc, utcnow

from .webhooks.errors import PersistenceFailure, ReferenceNotFound
from .webhooks.reference_resolver import (
    ENTITY_ORDER,
    ENTITY_SUBSCRIPTION,
    LookupKey,
    ReferenceResolver,
)

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Aplica un PaymentEvent verificado al ledger y a la entidad dueña."""

    MAX_CAS_ATTEMPTS = 3

    def __init__(
        self,
        resolver: Optional[ReferenceResolver] = None,
        transaction_repo: Optional[TransactionRepository] = None,
        order_repo: Optional[OrderRepository] = None,
        subscription_repo: Optional[SubscriptionRepository] = None,
    ) -> None:
        self.transaction_repo = transaction_repo or TransactionRepository()
        self.order_repo = order_repo or OrderRepository()
        self.subscription_repo = subscription_repo or SubscriptionRepository()
        self.resolver = resolver or ReferenceResolver(
            order_repo=self.order_repo,
            subscription_repo=self.subscription_repo,
            transaction_repo=self.transaction_repo,
        )

    async def reconcile(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        organization_id: Optional[str] = None,
    ) -> ReconcileResult:
        """
        Raises:
            ReferenceNotFound: la referencia no corresponde a ninguna entidad.
            PersistenceFailure: error de BD; el llamador debe hacer rollback.
        """
        try:
            lookup = await self.resolver.resolve(session, event, organization_id)
            upsert = await self.transaction_repo.upsert_from_event(
                session,
                event,
                organization_id=lookup.organization_id,
                order_id=lookup.entity_id if lookup.entity_type == ENTITY_ORDER else None,
                subscription_id=lookup.entity_id if lookup.entity_type == ENTITY_SUBSCRIPTION else None,
            )
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Upsert del ledger falló: {type(e).__name__}") from e

        if upsert is None:
            # (provider, tx) ya existe ligado a otra organización
            logger.error(
                "ledger_tenant_mismatch provider=%s tx=%s org=%s",
                event.provider.value,
                event.provider_transaction_id,
                lookup.organization_id,
            )
            raise ReferenceNotFound("La transacción pertenece a otra organización")

        try:
            if not upsert.changed:
                return await self._unchanged_result(session, event, lookup, upsert)
            if lookup.entity_type == ENTITY_ORDER:
                return await self._apply_order(session, event, lookup, upsert)
            return await self._apply_subscription(session, event, lookup, upsert)
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Transición de dominio falló: {type(e).__name__}") from e

    # ------------------------------------------------------------------
    # Sin cambios en el ledger
    # ------------------------------------------------------------------
    async def _unchanged_result(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        lookup: LookupKey,
        upsert: LedgerUpsertResult,
    ) -> ReconcileResult:
        outcome = (
            ReconcileOutcome.DUPLICATE
            if upsert.status == event.status
            else ReconcileOutcome.IGNORED_REGRESSION
        )
        final_status = await self._current_entity_status(session, lookup)
        logger.info(
            "webhook_reconciled provider=%s tx=%s outcome=%s ledger_status=%s incoming=%s",
            event.provider.value,
            event.provider_transaction_id,
            outcome.value,
            upsert.status.value,
            event.status.value,
        )
        observe_reconcile_transition(lookup.entity_type, outcome.value)
        return ReconcileResult(
            ledger_row_id=upsert.row_id,
            domain_entity_id=lookup.entity_id,
            entity_type=lookup.entity_type,
            transition_applied=False,
            final_status=final_status,
            outcome=outcome,
        )

    async def _current_entity_status(self, session: AsyncSession, lookup: LookupKey) -> str:
        if lookup.entity_type == ENTITY_ORDER:
            order = await self.order_repo.get_for_update_check(session, lookup.entity_id, lookup.organization_id)
            return str(order.payment_status) if order else ""
        subscription = await self.subscription_repo.get_for_update_check(session, lookup.entity_id)
        return str(subscription.status) if subscription else ""

    def _result(
        self,
        event: PaymentEvent,
        lookup: LookupKey,
        upsert: LedgerUpsertResult,
        outcome: ReconcileOutcome,
        final_status: str,
    ) -> ReconcileResult:
        applied = outcome == ReconcileOutcome.APPLIED
        # IgnoredRegression no es error: info
        log = logger.info if applied or outcome == ReconcileOutcome.IGNORED_REGRESSION else logger.debug
        log(
            "webhook_reconciled provider=%s tx=%s entity=%s id=%s outcome=%s final_status=%s",
            event.provider.value,
            event.provider_transaction_id,
            lookup.entity_type,
            lookup.entity_id,
            outcome.value,
            final_status,
        )
        observe_reconcile_transition(lookup.entity_type, outcome.value)
        return ReconcileResult(
            ledger_row_id=upsert.row_id,
            domain_entity_id=lookup.entity_id,
            entity_type=lookup.entity_type,
            transition_applied=applied,
            final_status=final_status,
            outcome=outcome,
        )

    # ------------------------------------------------------------------
    # Orden
    # ------------------------------------------------------------------
    async def _apply_order(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        lookup: LookupKey,
        upsert: LedgerUpsertResult,
    ) -> ReconcileResult:
        incoming = PaymentStatus(upsert.status)

        for attempt in range(1, self.MAX_CAS_ATTEMPTS + 1):
            order = await self.order_repo.get_for_update_check(session, lookup.entity_id, lookup.organization_id)
            if order is None:
                raise ReferenceNotFound(f"Orden {lookup.entity_id} desapareció durante la conciliación")

            current = OrderPaymentStatus(order.payment_status)
            target = resolve_order_transition(current, incoming)

            if target is NO_OP:
                return self._result(event, lookup, upsert, ReconcileOutcome.NO_TRANSITION, current.value)
            if target is IGNORED_REGRESSION:
                return self._result(event, lookup, upsert, ReconcileOutcome.IGNORED_REGRESSION, current.value)

            applied = await self.order_repo.compare_and_set_payment_status(
                session,
                order_id=order.id,
                organization_id=order.organization_id,
                expected=current,
                new_status=target,
                confirm=target == OrderPaymentStatus.PAID,
            )
            if applied:
                return self._result(event, lookup, upsert, ReconcileOutcome.APPLIED, target.value)

            logger.info(
                "order_cas_conflict order=%s expected=%s attempt=%d",
                order.id,
                current.value,
                attempt,
            )

        order = await self.order_repo.get_for_update_check(session, lookup.entity_id, lookup.organization_id)
        final_status = str(order.payment_status) if order else ""
        return self._result(event, lookup, upsert, ReconcileOutcome.NO_TRANSITION, final_status)

    # ------------------------------------------------------------------
    # Suscripción
    # ------------------------------------------------------------------
    async def _apply_subscription(
        self,
        session: AsyncSession,
        event: PaymentEvent,
        lookup: LookupKey,
        upsert: LedgerUpsertResult,
    ) -> ReconcileResult:
        incoming = PaymentStatus(upsert.status)

        for attempt in range(1, self.MAX_CAS_ATTEMPTS + 1):
            subscription = await self.subscription_repo.get_for_update_check(session, lookup.entity_id)
            if subscription is None:
                raise ReferenceNotFound(f"Suscripción {lookup.entity_id} desapareció durante la conciliación")

            current = SubscriptionStatus(subscription.status)
            target = resolve_subscription_transition(current, incoming)

            if target is NO_OP:
                return self._result(event, lookup, upsert, ReconcileOutcome.NO_TRANSITION, current.value)
            if target is IGNORED_REGRESSION:
                return self._result(event, lookup, upsert, ReconcileOutcome.IGNORED_REGRESSION, current.value)

            period_start = period_end = None
            if incoming == PaymentStatus.APPROVED:
                period_start, period_end = self.next_billing_period(
                    subscription.current_period_end,
                    subscription.billing_cycle.months if subscription.billing_cycle else 1,
                )

            applied = await self.subscription_repo.compare_and_set_status(
                session,
                subscription_id=subscription.id,
                expected_status=current,
                expected_period_end=subscription.current_period_end,
                new_status=target,
                period_start=period_start,
                period_end=period_end,
            )
            if applied:
                return self._result(event, lookup, upsert, ReconcileOutcome.APPLIED, target.value)

            logger.info(
                "subscription_cas_conflict subscription=%s expected=%s attempt=%d",
                subscription.id,
                current.value,
                attempt,
            )

        subscription = await self.subscription_repo.get_for_update_check(session, lookup.entity_id)
        final_status = str(subscription.status) if subscription else ""
        return self._result(event, lookup, upsert, ReconcileOutcome.NO_TRANSITION, final_status)

    @staticmethod
    def next_billing_period(current_period_end, months: int = 1, now=None):
        """
        Nuevo periodo: inicia en max(now, current_period_end) y dura `months`.

        Returns:
            (period_start, period_end) en UTC.
        """
        now = ensure_utc(now) if now is not None else utcnow()
        base = now
        if current_period_end is not None:
            base = max(now, ensure_utc(current_period_end))
        return base, add_months(base, months)


__all__ = ["ReconciliationService"]

# Fin del archivo backend/app/modules/payments/services/reconciliation_service.py
