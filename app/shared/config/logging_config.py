# -*- coding: utf-8 -*-
"""
backend/app/shared/config/logging_config.py

Configuración centralizada de logging del servicio de webhooks.
Soporta formato plain (desarrollo) y json (producción, python-json-logger).

Autor: LandingChat
Fecha: 2026-10-12
"""

import logging.config
from typing import Literal

_PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s]: %(message)s"
_JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
) -> None:
    """
    Configura el sistema de logging de la aplicación.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Formato de salida (plain, pretty, json)

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    # pretty == plain para efectos prácticos
    use_json = fmt == "json"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": _PLAIN_FORMAT},
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": _JSON_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if use_json else "default",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            # El SQL solo se muestra con DB_ECHO
            "sqlalchemy.engine": {"level": "WARNING"},
            "uvicorn.access": {"level": "WARNING"},
        },
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(logging_config)


def mask_phone(phone: str | None) -> str:
    """Enmascara un número telefónico dejando visibles los últimos 4 dígitos."""
    if not phone:
        return ""
    digits = str(phone)
    if len(digits) <= 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]


__all__ = ["setup_logging", "mask_phone"]

# Fin del archivo backend/app/shared/config/logging_config.py
