# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/order_status_enum.py

Estados de la orden de tienda:
- OrderPaymentStatus: ciclo de pago (lo muta la conciliación)
- OrderStatus: ciclo de fulfillment (la conciliación solo estampa `confirmed`)

Autor: LandingChat
Fecha: 2026-10-12
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class OrderPaymentStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"

    __db_enum_name__ = "order_payment_status_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)


class OrderStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    __db_enum_name__ = "order_status_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)


__all__ = ["OrderPaymentStatus", "OrderStatus"]

# Fin del archivo backend/app/modules/payments/enums/order_status_enum.py
