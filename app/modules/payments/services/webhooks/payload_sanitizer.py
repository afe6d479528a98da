# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/payload_sanitizer.py

Preparación de payloads y headers para la bitácora de webhooks.

El payload se conserva completo (postmortem y replay), salvo:
- PII del pagador (email, documento, teléfono, tarjeta) → "[REDACTED]"
- headers con credenciales (authorization, cookie, api keys) → "[REDACTED]"

Además se calcula el SHA-256 del body original para trazabilidad.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Mapping, Optional, Set

REDACTED = "[REDACTED]"

# Campos de PII en payloads de Wompi / ePayco
PII_FIELDS: Set[str] = {
    # Wompi
    "customer_email",
    "customer_data",
    "phone_number",
    "legal_id",
    "full_name",
    "shipping_address",
    # ePayco
    "x_customer_email",
    "x_customer_document",
    "x_customer_name",
    "x_customer_lastname",
    "x_customer_phone",
    "x_customer_movil",
    "x_customer_address",
    "x_customer_ip",
    "x_cardnumber",
}

SENSITIVE_HEADERS: Set[str] = {
    "authorization",
    "cookie",
    "set-cookie",
    "apikey",
    "x-api-key",
    "proxy-authorization",
}


def compute_payload_hash(raw_payload: bytes | str | dict) -> str:
    """
    Calcula SHA256 del payload original para trazabilidad.

    Args:
        raw_payload: Payload en bytes, string o dict

    Returns:
        Hash SHA256 del payload
    """
    if isinstance(raw_payload, dict):
        payload_bytes = json.dumps(raw_payload, sort_keys=True).encode("utf-8")
    elif isinstance(raw_payload, str):
        payload_bytes = raw_payload.encode("utf-8")
    else:
        payload_bytes = raw_payload

    return hashlib.sha256(payload_bytes).hexdigest()


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: (REDACTED if str(key).lower() in PII_FIELDS else _redact(item))
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_redact(item) for item in value]
    return value


def sanitize_webhook_payload(payload: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copia del payload con los campos de PII enmascarados (recursivo)."""
    if payload is None:
        return None
    return _redact(payload)


def sanitize_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Headers en minúsculas, con credenciales enmascaradas."""
    if not headers:
        return {}
    return {
        str(name).lower(): (REDACTED if str(name).lower() in SENSITIVE_HEADERS else str(value))
        for name, value in headers.items()
    }


__all__ = [
    "REDACTED",
    "PII_FIELDS",
    "SENSITIVE_HEADERS",
    "compute_payload_hash",
    "sanitize_webhook_payload",
    "sanitize_headers",
]

# Fin del archivo backend/app/modules/payments/services/webhooks/payload_sanitizer.py
