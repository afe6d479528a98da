# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/webhook_outcome_enum.py

Resultados de procesamiento de webhooks.

- WebhookOutcome: lo que se registra en webhook_logs (success | error)
- ReconcileOutcome: detalle de la conciliación de un PaymentEvent

Autor: LandingChat
Fecha: 2026-10-12
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class WebhookOutcome(StrEnum):
    SUCCESS = "success"
    ERROR = "error"

    __db_enum_name__ = "webhook_outcome_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)


class ReconcileOutcome(StrEnum):
    """Resultado de conciliar un evento contra ledger + entidad dueña."""

    APPLIED = "applied"                        # la entidad cambió de estado
    NO_TRANSITION = "no_transition"            # evento nuevo sin efecto de dominio (p. ej. PENDING)
    DUPLICATE = "duplicate"                    # mismo (proveedor, tx) y mismo estado: redelivery
    IGNORED_REGRESSION = "ignored_regression"  # estado terminal ya alcanzado


__all__ = ["WebhookOutcome", "ReconcileOutcome"]

# Fin del archivo backend/app/modules/payments/enums/webhook_outcome_enum.py
