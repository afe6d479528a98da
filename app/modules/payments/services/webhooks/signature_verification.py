# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/signature_verification.py

Verificación de firmas de webhooks (Wompi, ePayco, HMAC genérico).

IMPORTANTE:
- Funciones puras: sin I/O, sin settings. Los secretos llegan como argumento.
- Nunca lanzan: cualquier problema de parseo/decodificación devuelve False.
- Toda comparación de firmas es en tiempo constante (hmac.compare_digest).

Esquemas:
- Wompi: SHA-256( valores de signature.properties + timestamp + secreto ),
  comparado con signature.checksum del body.
- ePayco: SHA-256( p_cust_id_cliente + p_key + x_ref_payco + x_transaction_id
  + x_amount + x_currency_code ), comparado con x_signature.
- HMAC genérico (WhatsApp/Evolution y Meta Cloud): header
  `sha256=<hex>` con HMAC-SHA256(secreto, body crudo).

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

import hashlib
import hmac
import json
import logging
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)

HMAC_SIGNATURE_PREFIX = "sha256="


# =============================================================================
# COMPARACIÓN EN TIEMPO CONSTANTE
# =============================================================================

def constant_time_equals(a: Union[str, bytes, None], b: Union[str, bytes, None]) -> bool:
    """
    Compara dos firmas sin cortocircuito.

    hmac.compare_digest acumula XOR byte a byte; el tiempo no depende de
    la posición del primer byte distinto. Longitudes distintas → False.
    """
    if a is None or b is None:
        return False
    a_bytes = a.encode("utf-8") if isinstance(a, str) else a
    b_bytes = b.encode("utf-8") if isinstance(b, str) else b
    return hmac.compare_digest(a_bytes, b_bytes)


def sha256_hex(data: Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hmac_sha256_hex(secret: str, raw_body: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


# =============================================================================
# WOMPI
# =============================================================================

def _as_signature_text(value: Any) -> str:
    """Representación textual usada por Wompi al concatenar propiedades."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _walk(data: Any, dotted_path: str) -> Any:
    current = data
    for part in dotted_path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


_MISSING = object()


def compute_wompi_checksum(payload: Mapping[str, Any], integrity_secret: str) -> str:
    """
    Calcula el checksum de un evento Wompi.

    Las propiedades ausentes se omiten (no son error): es el comportamiento
    del proveedor y cambiarlo rechazaría eventos legítimos.
    """
    signature = payload.get("signature") or {}
    properties = signature.get("properties") or []
    data = payload.get("data") or {}

    values = []
    for prop in properties:
        value = _walk(data, str(prop))
        if value is not _MISSING:
            values.append(_as_signature_text(value))

    # sin la clave timestamp el emisor concatena "undefined"; con null, "null"
    timestamp = payload.get("timestamp", _MISSING)
    values.append("undefined" if timestamp is _MISSING else _as_signature_text(timestamp))
    values.append(integrity_secret)
    return sha256_hex("".join(values))


def verify_wompi_payload(payload: Mapping[str, Any], integrity_secret: Optional[str]) -> bool:
    if not integrity_secret:
        return False
    if not isinstance(payload, Mapping):
        return False

    signature = payload.get("signature")
    if not isinstance(signature, Mapping):
        return False
    checksum = signature.get("checksum")
    properties = signature.get("properties")
    if not isinstance(checksum, str) or not isinstance(properties, list):
        return False
    if not isinstance(payload.get("data"), Mapping):
        return False

    expected = compute_wompi_checksum(payload, integrity_secret)
    # Wompi documenta el checksum en mayúsculas; se acepta el hex completo en
    # minúsculas o en mayúsculas, nunca mezclado.
    return constant_time_equals(checksum, expected) or constant_time_equals(checksum, expected.upper())


def verify_wompi_signature(
    raw_body: bytes,
    headers: Optional[Mapping[str, str]],
    integrity_secret: Optional[str],
) -> bool:
    """
    Verifica un webhook Wompi. La firma viaja dentro del body JSON;
    `headers` se ignora (se recibe por uniformidad con los demás esquemas).
    """
    try:
        payload = json.loads(raw_body)
    except (ValueError, TypeError, RecursionError):
        logger.warning("wompi_signature_rejected reason=invalid_json")
        return False
    return verify_wompi_payload(payload, integrity_secret)


# =============================================================================
# EPAYCO
# =============================================================================

EPAYCO_SIGNATURE_FIELDS = ("x_ref_payco", "x_transaction_id", "x_amount", "x_currency_code")


def compute_epayco_signature(
    payload: Mapping[str, Any],
    customer_id: str,
    p_key: str,
) -> str:
    parts = [customer_id, p_key]
    parts.extend(str(payload.get(field, "")) for field in EPAYCO_SIGNATURE_FIELDS)
    return sha256_hex("".join(parts))


def verify_epayco_payload(
    payload: Mapping[str, Any],
    customer_id: Optional[str],
    p_key: Optional[str],
) -> bool:
    """Falla cerrado si falta cualquiera de los dos secretos o la firma."""
    if not customer_id or not p_key:
        return False
    if not isinstance(payload, Mapping):
        return False
    received = payload.get("x_signature")
    if not isinstance(received, str) or not received:
        return False
    expected = compute_epayco_signature(payload, customer_id, p_key)
    return constant_time_equals(received, expected)


# =============================================================================
# HMAC GENÉRICO (MENSAJERÍA)
# =============================================================================

def build_hmac_signature_header(secret: str, raw_body: bytes) -> str:
    """Valor del header `sha256=<hex>` para un body dado."""
    return f"{HMAC_SIGNATURE_PREFIX}{hmac_sha256_hex(secret, raw_body)}"


def verify_hmac_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
) -> bool:
    """Verificación estricta: requiere secreto y header."""
    if not secret or not signature_header:
        return False
    if not isinstance(raw_body, (bytes, bytearray)):
        return False
    try:
        expected = build_hmac_signature_header(secret, bytes(raw_body))
    except (TypeError, ValueError):
        return False
    return constant_time_equals(signature_header.strip(), expected)


def verify_optional_hmac_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
) -> bool:
    """
    Política opt-in de los webhooks de mensajería.

    - Sin secreto configurado: se acepta (con o sin header).
    - Con secreto: header obligatorio y válido.
    """
    if not secret:
        return True
    return verify_hmac_signature(raw_body, signature_header, secret)


__all__ = [
    "HMAC_SIGNATURE_PREFIX",
    "constant_time_equals",
    "sha256_hex",
    "hmac_sha256_hex",
    "compute_wompi_checksum",
    "verify_wompi_payload",
    "verify_wompi_signature",
    "EPAYCO_SIGNATURE_FIELDS",
    "compute_epayco_signature",
    "verify_epayco_payload",
    "build_hmac_signature_header",
    "verify_hmac_signature",
    "verify_optional_hmac_signature",
]

# Fin del archivo backend/app/modules/payments/services/webhooks/signature_verification.py
