# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/routes/routes_prometheus.py

Ruta Prometheus del servicio:
- /metrics → Export en formato Prometheus

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from fastapi import APIRouter
from starlette.responses import Response

from ..exporters.prometheus_exporter import CONTENT_TYPE_LATEST, render_prometheus_metrics

router_prometheus = APIRouter(tags=["metrics"])


@router_prometheus.get("/metrics", include_in_schema=False)
async def prometheus_metrics() -> Response:
    """Devuelve las métricas en formato Prometheus para scraping."""
    return Response(content=render_prometheus_metrics(), media_type=CONTENT_TYPE_LATEST)

# Fin del archivo backend/app/modules/payments/metrics/routes/routes_prometheus.py
