# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada del servicio de webhooks de LandingChat.

Ajustes clave:
- .env cargado ANTES de leer settings
- Logging de proceso vía app.shared.config.logging_config (plain | json)
- Prometheus en /metrics (registro propio del módulo payments)
- Health principal /health delegado a app.routes (health_routes.py)
- Shutdown ordenado: dispose del engine async

Autor: LandingChat
Fecha: 2026-10-12
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea settings
# En DEV: override=True para que .env mande sobre variables del entorno
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_ENVIRONMENT = os.getenv("ENVIRONMENT", "development").strip().strip('"').strip("'").lower()
_override_env = _ENVIRONMENT != "production"
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

from fastapi import FastAPI  # noqa: E402
import anyio  # noqa: E402
import uvicorn  # noqa: E402

from app.shared.config import get_webhooks_settings, setup_logging  # noqa: E402

_settings = get_webhooks_settings()
setup_logging(_settings.log_level, _settings.log_format)
logger = logging.getLogger(__name__)

logger.info(f"[dotenv] Loaded {_ENV_PATH} (override={_override_env}, ENVIRONMENT={_ENVIRONMENT})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    logger.info("🟢 Servicio de webhooks iniciado.")
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        with anyio.CancelScope(shield=True):
            from app.shared.database.database import engine

            await engine.dispose()
            logger.info("🔌 Pool de conexiones cerrado")
        logger.info("🔴 Servicio de webhooks apagado.")


openapi_tags = [
    {"name": "payments:webhooks", "description": "Webhooks de pasarelas de pago (Wompi, ePayco)"},
    {"name": "messaging:webhooks", "description": "Webhooks de WhatsApp (Evolution, Meta Cloud)"},
    {"name": "metrics", "description": "Métricas Prometheus"},
]

app = FastAPI(
    title="LandingChat Webhooks",
    description="Ingesta, verificación y conciliación idempotente de webhooks",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=openapi_tags,
)

# Incluye router maestro
from app.routes import router as main_router  # noqa: E402

app.include_router(main_router)


@app.get("/")
async def root():
    return {"service": "LandingChat Webhooks", "status": "active"}


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=_settings.is_development,
    )

# Fin del archivo backend/app/main.py
