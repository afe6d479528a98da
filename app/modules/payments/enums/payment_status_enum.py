# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/payment_status_enum.py

Estado normalizado de una transacción de pasarela.
Es el estado del PaymentEvent y de la fila del ledger (payment_transactions).

Autor: LandingChat
Fecha: 2026-10-12
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class PaymentStatus(StrEnum):
    """Estado de la transacción, homologado entre proveedores."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    VOIDED = "voided"
    ERROR = "error"

    __db_enum_name__ = "payment_status_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)


__all__ = ["PaymentStatus"]

# Fin del archivo backend/app/modules/payments/enums/payment_status_enum.py
