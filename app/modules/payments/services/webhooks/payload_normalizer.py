# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/payload_normalizer.py

Normalización de payloads de webhooks de pasarelas a PaymentEvent.

- Wompi: JSON `{event, data: {transaction}, signature, timestamp, sent_at}`.
  Solo `transaction.updated` produce evento; el resto → None (se reconoce con 200).
- ePayco: confirmación con campos `x_*`, en JSON o form-urlencoded.

Estados desconocidos o ausentes se mapean a PENDING: nunca se lanza por un
estado que no reconocemos.

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl

from pydantic import ValidationError

from app.modules.payments.enums import PaymentProvider, PaymentStatus
from app.modules.payments.schemas import PaymentEvent
from app.modules.payments.utils.datetime_helpers import parse_provider_timestamp

logger = logging.getLogger(__name__)


class WebhookNormalizationError(ValueError):
    """Payload mal formado: no se puede construir el evento."""


# =============================================================================
# TABLAS DE ESTADO
# =============================================================================

WOMPI_EVENT_TRANSACTION_UPDATED = "transaction.updated"

WOMPI_STATUS_MAP: Dict[str, PaymentStatus] = {
    "APPROVED": PaymentStatus.APPROVED,
    "DECLINED": PaymentStatus.DECLINED,
    "VOIDED": PaymentStatus.VOIDED,
    "ERROR": PaymentStatus.ERROR,
    "PENDING": PaymentStatus.PENDING,
}

EPAYCO_EVENT_CONFIRMATION = "confirmation"

# x_cod_response
EPAYCO_STATUS_MAP: Dict[str, PaymentStatus] = {
    "1": PaymentStatus.APPROVED,
    "2": PaymentStatus.DECLINED,
    "3": PaymentStatus.PENDING,
    "4": PaymentStatus.ERROR,
    "6": PaymentStatus.VOIDED,
}


def map_wompi_status(status: Any) -> PaymentStatus:
    return WOMPI_STATUS_MAP.get(str(status or "").strip().upper(), PaymentStatus.PENDING)


def map_epayco_status(cod_response: Any) -> PaymentStatus:
    return EPAYCO_STATUS_MAP.get(str(cod_response if cod_response is not None else "").strip(), PaymentStatus.PENDING)


# =============================================================================
# PARSEO DEL BODY
# =============================================================================

def parse_webhook_body(raw_body: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Parsea el body crudo a dict.

    JSON por defecto; `application/x-www-form-urlencoded` (ePayco) si el
    content-type lo indica.

    Raises:
        WebhookNormalizationError: body vacío o no parseable.
    """
    if not raw_body:
        raise WebhookNormalizationError("Body vacío")

    if content_type and "application/x-www-form-urlencoded" in content_type.lower():
        try:
            return dict(parse_qsl(raw_body.decode("utf-8"), keep_blank_values=True))
        except UnicodeDecodeError as e:
            raise WebhookNormalizationError("Body form-urlencoded inválido") from e

    try:
        parsed = json.loads(raw_body)
    except (ValueError, TypeError, RecursionError) as e:
        raise WebhookNormalizationError("Body JSON inválido") from e
    if not isinstance(parsed, dict):
        raise WebhookNormalizationError("El body debe ser un objeto JSON")
    return parsed


# =============================================================================
# WOMPI
# =============================================================================

def normalize_wompi(payload: Mapping[str, Any]) -> Optional[PaymentEvent]:
    """
    Solo `transaction.updated` produce un PaymentEvent. Un body sin `event`
    pero con `data.transaction` se trata como `transaction.updated`.
    """
    data = payload.get("data")
    transaction = data.get("transaction") if isinstance(data, Mapping) else None

    event_type = payload.get("event")
    if event_type is None and isinstance(transaction, Mapping):
        event_type = WOMPI_EVENT_TRANSACTION_UPDATED
    if event_type != WOMPI_EVENT_TRANSACTION_UPDATED:
        logger.info("wompi_event_acknowledged event=%s", event_type)
        return None

    if not isinstance(transaction, Mapping) or not transaction.get("id"):
        raise WebhookNormalizationError("transaction.updated sin data.transaction.id")

    try:
        amount = int(transaction.get("amount_in_cents") or 0)
    except (TypeError, ValueError) as e:
        raise WebhookNormalizationError("amount_in_cents inválido") from e

    occurred_at = parse_provider_timestamp(payload.get("sent_at")) or parse_provider_timestamp(payload.get("timestamp"))

    try:
        return PaymentEvent(
            provider=PaymentProvider.WOMPI,
            event_type=event_type,
            provider_transaction_id=str(transaction["id"]),
            provider_reference=str(transaction.get("reference") or ""),
            status=map_wompi_status(transaction.get("status")),
            amount_minor_units=amount,
            currency=str(transaction.get("currency") or "COP").upper(),
            payment_method=transaction.get("payment_method_type"),
            occurred_at=occurred_at,
            raw_payload=dict(payload),
        )
    except ValidationError as e:
        raise WebhookNormalizationError("Evento Wompi inválido") from e


# =============================================================================
# EPAYCO
# =============================================================================

def _epayco_amount_minor_units(raw_amount: Any) -> int:
    if raw_amount in (None, ""):
        return 0
    try:
        return int(round(float(raw_amount) * 100))
    except (TypeError, ValueError) as e:
        raise WebhookNormalizationError("x_amount inválido") from e


def normalize_epayco(payload: Mapping[str, Any]) -> Optional[PaymentEvent]:
    ref_payco = payload.get("x_ref_payco")
    if not ref_payco:
        raise WebhookNormalizationError("Confirmación ePayco sin x_ref_payco")

    reference = payload.get("x_id_invoice") or payload.get("x_extra1") or ""

    try:
        return PaymentEvent(
            provider=PaymentProvider.EPAYCO,
            event_type=EPAYCO_EVENT_CONFIRMATION,
            provider_transaction_id=str(ref_payco),
            provider_reference=str(reference),
            status=map_epayco_status(payload.get("x_cod_response")),
            amount_minor_units=_epayco_amount_minor_units(payload.get("x_amount")),
            currency=str(payload.get("x_currency_code") or "COP").upper(),
            payment_method=payload.get("x_franchise") or None,
            occurred_at=parse_provider_timestamp(payload.get("x_transaction_date")),
            raw_payload=dict(payload),
        )
    except ValidationError as e:
        raise WebhookNormalizationError("Confirmación ePayco inválida") from e


__all__ = [
    "WebhookNormalizationError",
    "WOMPI_EVENT_TRANSACTION_UPDATED",
    "WOMPI_STATUS_MAP",
    "EPAYCO_EVENT_CONFIRMATION",
    "EPAYCO_STATUS_MAP",
    "map_wompi_status",
    "map_epayco_status",
    "parse_webhook_body",
    "normalize_wompi",
    "normalize_epayco",
]

# Fin del archivo backend/app/modules/payments/services/webhooks/payload_normalizer.py
