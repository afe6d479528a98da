# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

Motor y fábrica de sesiones async de SQLAlchemy.

Expone:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- get_async_session / get_db (dependencias FastAPI)
- get_session_factory (dependencia: fábrica para sesiones independientes)
- check_database_health

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.shared.config.settings_webhooks import get_webhooks_settings

logger = logging.getLogger(__name__)

_settings = get_webhooks_settings()

engine = create_async_engine(
    _settings.database_url,
    echo=_settings.db_echo,
    pool_pre_ping=True,
)

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencias FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            # rollback para liberar cualquier transacción/lock
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# Alias usado por los routers
get_db = get_async_session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Fábrica de sesiones independientes.

    La usa el registro de auditoría: escribe en su propia transacción para
    que el registro sobreviva al rollback de la conciliación.
    """
    return SessionLocal


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning(f"[DB] health check falló: {type(e).__name__}")
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "get_async_session",
    "get_db",
    "get_session_factory",
    "check_database_health",
]

# Fin del archivo backend/app/shared/database/database.py
