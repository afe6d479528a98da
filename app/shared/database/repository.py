# -*- coding: utf-8 -*-
"""
backend/app/shared/database/repository.py

Repositorio base para operaciones async con SQLAlchemy.

Autor: LandingChat
Fecha: 2026-10-12
"""

from typing import Generic, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para altas comunes."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # Altas
    # -------------------------------------------------------------
    async def create(self, session: AsyncSession, **kwargs) -> T:
        obj = self.model(**kwargs)
        session.add(obj)
        await session.flush()
        return obj

# Fin del archivo backend/app/shared/database/repository.py
