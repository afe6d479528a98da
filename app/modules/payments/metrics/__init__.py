# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/__init__.py

Métricas Prometheus del núcleo de webhooks.

Autor: LandingChat
Fecha: 2026-10-12
"""

from .exporters.prometheus_exporter import (
    observe_reconcile_transition,
    observe_webhook_outcome,
    observe_webhook_received,
    observe_webhook_rejected,
    observe_webhook_verified,
    render_prometheus_metrics,
)
from .helpers import map_webhook_result_to_outcome

__all__ = [
    "observe_reconcile_transition",
    "observe_webhook_outcome",
    "observe_webhook_received",
    "observe_webhook_rejected",
    "observe_webhook_verified",
    "render_prometheus_metrics",
    "map_webhook_result_to_outcome",
]

# Fin del archivo backend/app/modules/payments/metrics/__init__.py
