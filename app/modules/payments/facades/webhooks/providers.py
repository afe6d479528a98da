# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/providers.py

Tabla de despacho de proveedores de pago.

Cada proveedor aporta un verificador de firma y un normalizador; agregar
un proveedor es agregar una entrada aquí, sin tocar el handler.

Meta Cloud es un proveedor de mensajería: no tiene adaptador de pagos y
la ruta de pagos responde 404 (UnsupportedProvider).

Bypass de firma (solo desarrollo):
- ALLOW_INSECURE_WEBHOOKS=true **y** ENVIRONMENT=development.
- En cualquier otro entorno el flag se ignora y se registra un error.

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from app.modules.payments.enums import PaymentProvider
from app.modules.payments.schemas import GatewayCredentials, PaymentEvent
from app.modules.payments.services.webhooks.errors import UnsupportedProvider
from app.modules.payments.services.webhooks.payload_normalizer import (
    WebhookNormalizationError,
    normalize_epayco,
    normalize_wompi,
    parse_webhook_body,
)
from app.modules.payments.services.webhooks.signature_verification import (
    verify_epayco_payload,
    verify_wompi_signature,
)
from app.shared.config.settings_webhooks import get_webhooks_settings

logger = logging.getLogger(__name__)


Verifier = Callable[[bytes, Mapping[str, str], GatewayCredentials], bool]
Normalizer = Callable[[Mapping[str, Any]], Optional[PaymentEvent]]


@dataclass(frozen=True)
class ProviderAdapter:
    provider: PaymentProvider
    verify: Verifier
    normalize: Normalizer
    event_type_field: Optional[str] = None
    default_event_type: Optional[str] = None

    def event_type(self, payload: Mapping[str, Any]) -> Optional[str]:
        if self.event_type_field and isinstance(payload.get(self.event_type_field), str):
            return payload[self.event_type_field]
        return self.default_event_type


def _verify_wompi(raw_body: bytes, headers: Mapping[str, str], credentials: GatewayCredentials) -> bool:
    return verify_wompi_signature(raw_body, headers, credentials.integrity_secret)


def _verify_epayco(raw_body: bytes, headers: Mapping[str, str], credentials: GatewayCredentials) -> bool:
    # ePayco firma campos del formulario, no el body crudo
    try:
        payload = parse_webhook_body(raw_body, headers.get("content-type"))
    except WebhookNormalizationError:
        return False
    return verify_epayco_payload(payload, credentials.integrity_secret, credentials.encryption_key)


PAYMENT_PROVIDERS: Dict[PaymentProvider, ProviderAdapter] = {
    PaymentProvider.WOMPI: ProviderAdapter(
        provider=PaymentProvider.WOMPI,
        verify=_verify_wompi,
        normalize=normalize_wompi,
        event_type_field="event",
    ),
    PaymentProvider.EPAYCO: ProviderAdapter(
        provider=PaymentProvider.EPAYCO,
        verify=_verify_epayco,
        normalize=normalize_epayco,
        default_event_type="confirmation",
    ),
}


def get_payment_adapter(provider: Optional[PaymentProvider]) -> ProviderAdapter:
    """
    Raises:
        UnsupportedProvider: proveedor desconocido o sin adaptador de pagos.
    """
    adapter = PAYMENT_PROVIDERS.get(provider) if provider is not None else None
    if adapter is None:
        raise UnsupportedProvider(f"Proveedor sin adaptador de pagos: {provider}")
    return adapter


def allow_insecure_webhooks(settings=None) -> bool:
    """True solo si el flag está activo y el entorno es desarrollo."""
    settings = settings or get_webhooks_settings()
    if not settings.allow_insecure_webhooks:
        return False
    if not settings.is_development:
        logger.error(
            "SECURITY VIOLATION: ALLOW_INSECURE_WEBHOOKS=true en entorno "
            f"'{settings.environment}'. Ignorando flag y forzando verificación real."
        )
        return False
    return True


__all__ = [
    "ProviderAdapter",
    "PAYMENT_PROVIDERS",
    "get_payment_adapter",
    "allow_insecure_webhooks",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/providers.py
