# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/facades/providers.py

Tabla de despacho de proveedores de mensajería.

Cada proveedor define el header de firma y su normalizador; la política de
firma es la misma para ambos: opt-in (sin secreto configurado se acepta,
con secreto el header es obligatorio y debe ser válido).

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.modules.messaging.enums import MessagingProvider
from app.modules.messaging.schemas import MessagingEvent
from app.modules.messaging.services.event_normalizer import normalize_evolution, normalize_meta_cloud
from app.modules.payments.services.webhooks.signature_verification import verify_optional_hmac_signature

EVOLUTION_SIGNATURE_HEADER = "x-webhook-signature"
META_SIGNATURE_HEADER = "x-hub-signature-256"


@dataclass(frozen=True)
class MessagingAdapter:
    provider: MessagingProvider
    signature_header: str
    normalize: Callable[[Mapping[str, Any]], List[MessagingEvent]]
    event_type_field: str

    def verify(self, raw_body: bytes, headers: Mapping[str, str], secret: Optional[str]) -> bool:
        """`headers` debe venir con llaves en minúsculas."""
        return verify_optional_hmac_signature(raw_body, headers.get(self.signature_header), secret)

    def event_type(self, payload: Optional[Mapping[str, Any]]) -> Optional[str]:
        if not payload:
            return None
        value = payload.get(self.event_type_field)
        return value if isinstance(value, str) else None


MESSAGING_PROVIDERS: Dict[MessagingProvider, MessagingAdapter] = {
    MessagingProvider.EVOLUTION: MessagingAdapter(
        provider=MessagingProvider.EVOLUTION,
        signature_header=EVOLUTION_SIGNATURE_HEADER,
        normalize=normalize_evolution,
        event_type_field="event",
    ),
    MessagingProvider.META_CLOUD: MessagingAdapter(
        provider=MessagingProvider.META_CLOUD,
        signature_header=META_SIGNATURE_HEADER,
        normalize=normalize_meta_cloud,
        event_type_field="object",
    ),
}


__all__ = [
    "EVOLUTION_SIGNATURE_HEADER",
    "META_SIGNATURE_HEADER",
    "MessagingAdapter",
    "MESSAGING_PROVIDERS",
]

# Fin del archivo backend/app/modules/messaging/facades/providers.py
