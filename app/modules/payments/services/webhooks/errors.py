# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/errors.py

Taxonomía de errores del flujo de webhooks.

Cada error conoce su código HTTP y un mensaje público seguro: las rutas
responden `{"error": public_message}` y nunca exponen el detalle interno.

IgnoredRegression y UnknownEventType NO son errores: se expresan como
ReconcileOutcome.IGNORED_REGRESSION y como normalize(...) → None.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from typing import Optional


class WebhookError(Exception):
    """Base de errores de webhooks con mapeo a HTTP."""

    status_code: int = 500
    public_message: str = "Internal server error"
    reason: str = "internal_error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.public_message
        super().__init__(self.detail)


class SignatureInvalid(WebhookError):
    status_code = 401
    public_message = "Invalid signature"
    reason = "invalid_signature"


class PayloadInvalid(WebhookError):
    status_code = 400
    public_message = "Invalid payload"
    reason = "invalid_payload"


class ReferenceNotFound(WebhookError):
    """La referencia no corresponde a ninguna orden/suscripción: problema de integridad."""

    status_code = 400
    public_message = "Reference not found"
    reason = "reference_not_found"


class GatewayNotConfigured(WebhookError):
    status_code = 400
    public_message = "Payment gateway not configured"
    reason = "gateway_not_configured"


class OrganizationNotFound(WebhookError):
    status_code = 404
    public_message = "Organization not found"
    reason = "organization_not_found"


class UnsupportedProvider(WebhookError):
    status_code = 404
    public_message = "Unsupported provider"
    reason = "unsupported_provider"


class GatewayMisconfigured(WebhookError):
    """Secreto almacenado ilegible (llave maestra o formato): 500 para que el proveedor reintente."""

    status_code = 500
    public_message = "Internal server error"
    reason = "gateway_misconfigured"


class PersistenceFailure(WebhookError):
    """Fallo de BD: 500 para que el proveedor reintente (la idempotencia lo hace seguro)."""

    status_code = 500
    public_message = "Internal server error"
    reason = "persistence_failure"


__all__ = [
    "WebhookError",
    "SignatureInvalid",
    "PayloadInvalid",
    "ReferenceNotFound",
    "GatewayNotConfigured",
    "GatewayMisconfigured",
    "OrganizationNotFound",
    "UnsupportedProvider",
    "PersistenceFailure",
]

# Fin del archivo backend/app/modules/payments/services/webhooks/errors.py
