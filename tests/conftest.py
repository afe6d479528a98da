# backend/tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests del servicio de webhooks.

- Variables de entorno de prueba ANTES de importar la app (settings singleton)
- Engine aiosqlite por test sobre archivo temporal (NullPool): la auditoría
  escribe con su propia sesión y debe ver las mismas tablas
- App FastAPI con get_db / get_session_factory sobrescritos
- Cliente httpx con ciclo de vida (asgi-lifespan)
"""

import os
from collections.abc import AsyncIterator

import pytest

# -----------------------------------------------------------------------------
# 0) Entorno de pruebas (antes de cualquier import de app.*)
# -----------------------------------------------------------------------------
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENCRYPTION_KEY"] = "test-master-key"
os.environ["ALLOW_INSECURE_WEBHOOKS"] = "false"
os.environ["GATEWAY_CONFIG_CACHE_TTL_SECONDS"] = "60"
for _var in ("EVOLUTION_WEBHOOK_SECRET", "META_APP_SECRET", "META_VERIFY_TOKEN"):
    os.environ.pop(_var, None)

from httpx import ASGITransport, AsyncClient  # noqa: E402
from asgi_lifespan import LifespanManager  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import app.modules.messaging.models  # noqa: E402,F401
import app.modules.payments.models  # noqa: E402,F401
from app.modules.payments.services.gateway_config_provider import clear_gateway_config_cache  # noqa: E402
from app.shared.config.settings_webhooks import reset_webhooks_settings  # noqa: E402
from app.shared.database.base import Base  # noqa: E402


# -----------------------------------------------------------------------------
# 1) Aislamiento de estado global
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolate_global_state():
    reset_webhooks_settings()
    clear_gateway_config_cache()
    yield
    reset_webhooks_settings()
    clear_gateway_config_cache()


# -----------------------------------------------------------------------------
# 2) Base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'webhooks.db'}",
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


# -----------------------------------------------------------------------------
# 3) App FastAPI y cliente httpx
# -----------------------------------------------------------------------------
@pytest.fixture
def app(session_factory):
    """
    Carga la app **después** de setear env vars y sobrescribe las
    dependencias de BD con el engine del test.
    """
    from app.main import app as fastapi_app
    from app.shared.database.database import get_db, get_session_factory

    async def _db_override():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _db_override
    fastapi_app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
