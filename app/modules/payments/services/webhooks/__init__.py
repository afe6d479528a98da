# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/__init__.py

Servicios de webhooks: verificación de firmas, normalización de payloads,
resolución de referencias y sanitización para auditoría.

Autor: LandingChat
Fecha: 2026-10-12
"""

from .errors import (
    GatewayMisconfigured,
    GatewayNotConfigured,
    OrganizationNotFound,
    PayloadInvalid,
    PersistenceFailure,
    ReferenceNotFound,
    SignatureInvalid,
    UnsupportedProvider,
    WebhookError,
)
from .payload_normalizer import (
    WebhookNormalizationError,
    normalize_epayco,
    normalize_wompi,
    parse_webhook_body,
)
from .payload_sanitizer import compute_payload_hash, sanitize_headers, sanitize_webhook_payload
from .signature_verification import (
    constant_time_equals,
    verify_epayco_payload,
    verify_hmac_signature,
    verify_optional_hmac_signature,
    verify_wompi_signature,
)

__all__ = [
    # Errores
    "WebhookError",
    "SignatureInvalid",
    "PayloadInvalid",
    "ReferenceNotFound",
    "GatewayNotConfigured",
    "GatewayMisconfigured",
    "OrganizationNotFound",
    "UnsupportedProvider",
    "PersistenceFailure",

    # Normalización
    "WebhookNormalizationError",
    "parse_webhook_body",
    "normalize_wompi",
    "normalize_epayco",

    # Sanitización
    "compute_payload_hash",
    "sanitize_headers",
    "sanitize_webhook_payload",

    # Verificación de firmas
    "constant_time_equals",
    "verify_wompi_signature",
    "verify_epayco_payload",
    "verify_hmac_signature",
    "verify_optional_hmac_signature",
]

# Fin del archivo backend/app/modules/payments/services/webhooks/__init__.py
