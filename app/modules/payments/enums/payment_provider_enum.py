# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/payment_provider_enum.py

Enum de proveedores que envían webhooks de pago.

Autor: LandingChat
Fecha: 2026-10-12
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class PaymentProvider(StrEnum):
    """Proveedor externo (pasarela o Meta Cloud)."""

    WOMPI = "wompi"
    EPAYCO = "epayco"
    META_CLOUD = "meta_cloud"

    __db_enum_name__ = "payment_provider_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return _as_db_enum(cls)

    @classmethod
    def parse(cls, value: str) -> "PaymentProvider | None":
        """Convierte el segmento de ruta en proveedor; None si no se reconoce."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None


__all__ = ["PaymentProvider"]

# Fin del archivo backend/app/modules/payments/enums/payment_provider_enum.py
