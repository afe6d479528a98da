# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/state_transitions.py

Tablas de transición monotónicas usadas por la conciliación de webhooks.

Cada tabla está indexada por (estado_actual, estado_pago_entrante) y
devuelve el nuevo estado, o un `TransitionSkip`:
- NO_OP: el evento no mueve la entidad (p. ej. PENDING, o ya está en ese estado)
- IGNORED_REGRESSION: la entidad ya está en estado terminal; el evento se
  reconoce pero no se aplica

Ledger (payment_transactions.status):
- pending  → approved | declined | voided | error
- approved → voided    (reverso posterior a la aprobación)
- declined, voided, error → (terminales)

Orden (orders.payment_status):
- pending | processing --approved-->               paid   (terminal)
- pending | processing --declined|error|voided-->  failed (terminal)

Suscripción (subscriptions.status):
- trialing | active | past_due --approved-->  active (periodo extendido)
- trialing | active --declined|error-->       past_due
- voided no cambia la suscripción: la cancelación la decide otro componente
- cancelled es terminal

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from enum import StrEnum
from typing import Dict, Set, Tuple, Union

from .order_status_enum import OrderPaymentStatus
from .payment_status_enum import PaymentStatus
from .subscription_status_enum import SubscriptionStatus


class TransitionSkip(StrEnum):
    NO_OP = "no_op"
    IGNORED_REGRESSION = "ignored_regression"


NO_OP = TransitionSkip.NO_OP
IGNORED_REGRESSION = TransitionSkip.IGNORED_REGRESSION

_P = PaymentStatus
_O = OrderPaymentStatus
_S = SubscriptionStatus


# ---------------------------------------------------------------------------
# Ledger: estado_origen → {estados_destino_permitidos}
# ---------------------------------------------------------------------------
LEDGER_STATUS_TRANSITIONS: Dict[PaymentStatus, Set[PaymentStatus]] = {
    _P.PENDING: {_P.APPROVED, _P.DECLINED, _P.VOIDED, _P.ERROR},
    _P.APPROVED: {_P.VOIDED},
    _P.DECLINED: set(),
    _P.VOIDED: set(),
    _P.ERROR: set(),
}


# ---------------------------------------------------------------------------
# Orden
# ---------------------------------------------------------------------------
ORDER_TRANSITIONS: Dict[Tuple[OrderPaymentStatus, PaymentStatus], Union[OrderPaymentStatus, TransitionSkip]] = {
    (_O.PENDING, _P.PENDING): NO_OP,
    (_O.PENDING, _P.APPROVED): _O.PAID,
    (_O.PENDING, _P.DECLINED): _O.FAILED,
    (_O.PENDING, _P.ERROR): _O.FAILED,
    (_O.PENDING, _P.VOIDED): _O.FAILED,

    (_O.PROCESSING, _P.PENDING): NO_OP,
    (_O.PROCESSING, _P.APPROVED): _O.PAID,
    (_O.PROCESSING, _P.DECLINED): _O.FAILED,
    (_O.PROCESSING, _P.ERROR): _O.FAILED,
    (_O.PROCESSING, _P.VOIDED): _O.FAILED,

    (_O.PAID, _P.PENDING): IGNORED_REGRESSION,
    (_O.PAID, _P.APPROVED): NO_OP,
    (_O.PAID, _P.DECLINED): IGNORED_REGRESSION,
    (_O.PAID, _P.ERROR): IGNORED_REGRESSION,
    (_O.PAID, _P.VOIDED): IGNORED_REGRESSION,

    (_O.FAILED, _P.PENDING): IGNORED_REGRESSION,
    (_O.FAILED, _P.APPROVED): IGNORED_REGRESSION,
    (_O.FAILED, _P.DECLINED): NO_OP,
    (_O.FAILED, _P.ERROR): NO_OP,
    (_O.FAILED, _P.VOIDED): NO_OP,
}


# ---------------------------------------------------------------------------
# Suscripción
# ---------------------------------------------------------------------------
SUBSCRIPTION_TRANSITIONS: Dict[Tuple[SubscriptionStatus, PaymentStatus], Union[SubscriptionStatus, TransitionSkip]] = {
    (_S.TRIALING, _P.PENDING): NO_OP,
    (_S.TRIALING, _P.APPROVED): _S.ACTIVE,
    (_S.TRIALING, _P.DECLINED): _S.PAST_DUE,
    (_S.TRIALING, _P.ERROR): _S.PAST_DUE,
    (_S.TRIALING, _P.VOIDED): NO_OP,

    # active → active sí es transición: extiende el periodo
    (_S.ACTIVE, _P.PENDING): NO_OP,
    (_S.ACTIVE, _P.APPROVED): _S.ACTIVE,
    (_S.ACTIVE, _P.DECLINED): _S.PAST_DUE,
    (_S.ACTIVE, _P.ERROR): _S.PAST_DUE,
    (_S.ACTIVE, _P.VOIDED): NO_OP,

    (_S.PAST_DUE, _P.PENDING): NO_OP,
    (_S.PAST_DUE, _P.APPROVED): _S.ACTIVE,
    (_S.PAST_DUE, _P.DECLINED): NO_OP,
    (_S.PAST_DUE, _P.ERROR): NO_OP,
    (_S.PAST_DUE, _P.VOIDED): NO_OP,

    (_S.CANCELLED, _P.PENDING): IGNORED_REGRESSION,
    (_S.CANCELLED, _P.APPROVED): IGNORED_REGRESSION,
    (_S.CANCELLED, _P.DECLINED): IGNORED_REGRESSION,
    (_S.CANCELLED, _P.ERROR): IGNORED_REGRESSION,
    (_S.CANCELLED, _P.VOIDED): IGNORED_REGRESSION,
}

TERMINAL_ORDER_STATUSES: Set[OrderPaymentStatus] = {_O.PAID, _O.FAILED}
TERMINAL_SUBSCRIPTION_STATUSES: Set[SubscriptionStatus] = {_S.CANCELLED}


def resolve_order_transition(
    current: OrderPaymentStatus,
    incoming: PaymentStatus,
) -> Union[OrderPaymentStatus, TransitionSkip]:
    """
    Nuevo payment_status de la orden para un pago entrante.

    Raises:
        ValueError: combinación no contemplada en la tabla.
    """
    try:
        return ORDER_TRANSITIONS[(OrderPaymentStatus(current), PaymentStatus(incoming))]
    except KeyError:
        raise ValueError(
            f"Transición de orden no definida: '{current}' + '{incoming}'"
        ) from None


def resolve_subscription_transition(
    current: SubscriptionStatus,
    incoming: PaymentStatus,
) -> Union[SubscriptionStatus, TransitionSkip]:
    """
    Nuevo status de la suscripción para un pago entrante.

    Raises:
        ValueError: combinación no contemplada en la tabla.
    """
    try:
        return SUBSCRIPTION_TRANSITIONS[(SubscriptionStatus(current), PaymentStatus(incoming))]
    except KeyError:
        raise ValueError(
            f"Transición de suscripción no definida: '{current}' + '{incoming}'"
        ) from None


__all__ = [
    "TransitionSkip",
    "NO_OP",
    "IGNORED_REGRESSION",
    "LEDGER_STATUS_TRANSITIONS",
    "ORDER_TRANSITIONS",
    "SUBSCRIPTION_TRANSITIONS",
    "TERMINAL_ORDER_STATUSES",
    "TERMINAL_SUBSCRIPTION_STATUSES",
    "resolve_order_transition",
    "resolve_subscription_transition",
]

# Fin del archivo backend/app/modules/payments/enums/state_transitions.py
