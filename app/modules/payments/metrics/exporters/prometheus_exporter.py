# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/exporters/prometheus_exporter.py

Exporter Prometheus del núcleo de webhooks (pagos y mensajería).

Métricas separadas por etapa:
- received: todo lo que llega
- verified: resultado de la verificación de firma
- outcome: resultado de negocio (applied/duplicate/ignored/error/...)
- rejected: rechazos con razón (invalid_signature, reference_not_found, ...)
- reconcile_transitions: transiciones de dominio por entidad

Autor: LandingChat
Fecha: 2026-10-12
"""

import logging

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
# Registro global de Prometheus
# --------------------------------------------------------------------------
registry = CollectorRegistry()

# --------------------------------------------------------------------------
# Definición de métricas
# --------------------------------------------------------------------------
WEBHOOKS_RECEIVED_TOTAL = Counter(
    "webhooks_received_total",
    "Total webhooks recibidos por proveedor",
    ["provider"],
    registry=registry,
)

WEBHOOKS_VERIFIED_TOTAL = Counter(
    "webhooks_verified_total",
    "Total webhooks por resultado de verificación de firma",
    ["provider", "result"],  # result: success/failure
    registry=registry,
)

WEBHOOKS_OUTCOME_TOTAL = Counter(
    "webhooks_outcome_total",
    "Total webhooks por outcome de negocio",
    ["provider", "outcome"],
    registry=registry,
)

WEBHOOKS_REJECTED_TOTAL = Counter(
    "webhooks_rejected_total",
    "Total webhooks rechazados por proveedor y razón",
    ["provider", "reason"],
    registry=registry,
)

WEBHOOKS_PROCESSING_SECONDS = Histogram(
    "webhook_processing_seconds",
    "Tiempo de procesamiento de webhooks (segundos)",
    ["provider"],
    registry=registry,
)

RECONCILE_TRANSITIONS_TOTAL = Counter(
    "reconcile_transitions_total",
    "Resultados de conciliación por entidad (order/subscription)",
    ["entity", "result"],
    registry=registry,
)


# --------------------------------------------------------------------------
# Funciones auxiliares
# --------------------------------------------------------------------------
def render_prometheus_metrics() -> bytes:
    """Genera la salida actual de las métricas en formato Prometheus."""
    return generate_latest(registry)


def observe_webhook_received(provider: str) -> None:
    WEBHOOKS_RECEIVED_TOTAL.labels(provider=provider).inc()


def observe_webhook_verified(provider: str, verified: bool) -> None:
    WEBHOOKS_VERIFIED_TOTAL.labels(provider=provider, result="success" if verified else "failure").inc()


def observe_webhook_outcome(provider: str, outcome: str, duration: float) -> None:
    """
    Registra outcome de negocio y duración total del procesamiento.

    Args:
        provider: wompi/epayco/evolution/meta_cloud
        outcome: applied/no_transition/duplicate/ignored_regression/ignored/error
        duration: segundos desde la recepción
    """
    WEBHOOKS_OUTCOME_TOTAL.labels(provider=provider, outcome=outcome).inc()
    WEBHOOKS_PROCESSING_SECONDS.labels(provider=provider).observe(duration)
    logger.debug(f"[Prometheus] Webhook {provider} outcome={outcome} duration={duration:.4f}s")


def observe_webhook_rejected(provider: str, reason: str) -> None:
    WEBHOOKS_REJECTED_TOTAL.labels(provider=provider, reason=reason).inc()
    logger.debug(f"[Prometheus] Webhook {provider} rejected reason={reason}")


def observe_reconcile_transition(entity: str, result: str) -> None:
    RECONCILE_TRANSITIONS_TOTAL.labels(entity=entity, result=result).inc()


__all__ = [
    "CONTENT_TYPE_LATEST",
    "registry",
    "render_prometheus_metrics",
    "observe_webhook_received",
    "observe_webhook_verified",
    "observe_webhook_outcome",
    "observe_webhook_rejected",
    "observe_reconcile_transition",
]

# Fin del archivo backend/app/modules/payments/metrics/exporters/prometheus_exporter.py
