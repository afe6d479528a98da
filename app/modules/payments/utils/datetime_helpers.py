# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/utils/datetime_helpers.py

Utilidades de fechas para webhooks y periodos de facturación.

- Timestamps de proveedor (ISO 8601 o epoch) → datetime UTC aware.
- SQLite devuelve datetimes naive: `ensure_utc` los normaliza antes de comparar.
- Suma de meses calendario con recorte a fin de mes (31-ene + 1 mes = 28/29-feb).

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    """Timestamp UTC actual (timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Asegura que un datetime sea UTC timezone-aware.

    Examples:
        >>> ensure_utc(datetime(2025, 10, 26, 14, 30)).tzinfo == timezone.utc
        True
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    if dt.tzinfo != timezone.utc:
        return dt.astimezone(timezone.utc)
    return dt


def from_iso8601(iso_string: str) -> datetime:
    """
    Parsea una cadena ISO 8601 y retorna datetime UTC timezone-aware.

    Examples:
        >>> from_iso8601("2025-10-26T14:30:00Z").tzinfo == timezone.utc
        True
    """
    return ensure_utc(datetime.fromisoformat(iso_string.replace("Z", "+00:00")))


def parse_provider_timestamp(value: Union[str, int, float, None]) -> Optional[datetime]:
    """
    Convierte el timestamp de un proveedor a datetime UTC.

    Acepta ISO 8601, epoch en segundos o epoch en milisegundos
    (numérico o string). Devuelve None si no se puede interpretar.
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped.lstrip("-").isdigit():
            try:
                return from_iso8601(stripped)
            except ValueError:
                return None
        value = int(stripped)

    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    # epoch en milisegundos (posterior a ~2001 en ms)
    if seconds > 1e11:
        seconds = seconds / 1000.0
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def add_months(dt: datetime, months: int) -> datetime:
    """
    Suma meses calendario recortando el día al último día del mes destino.

    Examples:
        >>> add_months(datetime(2026, 1, 31, tzinfo=timezone.utc), 1).day
        28
    """
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


__all__ = [
    "utcnow",
    "ensure_utc",
    "from_iso8601",
    "parse_provider_timestamp",
    "add_months",
]

# Fin del archivo backend/app/modules/payments/utils/datetime_helpers.py
