# -*- coding: utf-8 -*-
"""
backend/app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- as_db_enum: helper para mapear enums Python a columnas portables
- JSONType: JSON que usa JSONB en PostgreSQL

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Type

from sqlalchemy import JSON, MetaData
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

JSONType = JSON().with_variant(JSONB(), "postgresql")


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def new_uuid() -> str:
    """Default de PKs: UUID v4 en texto (36 chars)."""
    return str(uuid.uuid4())


# ===== HELPER GENÉRICO PARA ENUMS =====
def as_db_enum(enum_cls: Type[Enum], name: str | None = None) -> SAEnum:
    """
    Devuelve un tipo Enum de SQLAlchemy almacenado como VARCHAR.

    Uso típico:

        class Order(Base):
            payment_status: Mapped[OrderPaymentStatus] = mapped_column(
                as_db_enum(OrderPaymentStatus),
                nullable=False,
            )

    - Persiste el `.value` del enum (no el nombre del miembro).
    - native_enum=False: no requiere tipos ENUM creados en la BD, funciona
      igual en PostgreSQL y en SQLite (tests).
    """
    enum_name = name or getattr(enum_cls, "__db_enum_name__", enum_cls.__name__.lower())

    def _values(_: object) -> list[str]:
        return [e.value for e in enum_cls]  # type: ignore[arg-type]

    return SAEnum(
        enum_cls,
        name=enum_name,
        native_enum=False,
        create_constraint=False,
        length=32,
        values_callable=_values,
        validate_strings=True,
    )


__all__ = ["Base", "NAMING_CONVENTION", "JSONType", "as_db_enum", "new_uuid"]

# Fin del archivo backend/app/shared/database/base.py
