# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from .base import Base, JSONType, NAMING_CONVENTION, as_db_enum, new_uuid
from .repository import BaseRepository

__all__ = [
    "Base",
    "JSONType",
    "NAMING_CONVENTION",
    "as_db_enum",
    "new_uuid",
    "BaseRepository",
]

# Fin del archivo backend/app/shared/database/__init__.py
