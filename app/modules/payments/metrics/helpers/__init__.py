# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/helpers/__init__.py

Helper para mapear resultados de webhook a etiquetas de métricas.

Autor: LandingChat
Fecha: 2026-10-12
"""
from __future__ import annotations

from typing import Any, Dict

IGNORED_OUTCOME = "ignored"
ERROR_OUTCOME = "error"


def map_webhook_result_to_outcome(result: Dict[str, Any]) -> str:
    """
    Etiqueta `outcome` para webhooks_outcome_total.

    El handler devuelve:
    - {"received": True, "reconcile": {"outcome": "applied", ...}}
    - {"received": True, "ignored": True}        (evento no accionable)
    - {"received": True, "duplicate": True, ...}
    """
    reconcile = result.get("reconcile")
    if isinstance(reconcile, dict) and reconcile.get("outcome"):
        return str(reconcile["outcome"])
    if result.get("ignored"):
        return IGNORED_OUTCOME
    if result.get("received"):
        return str(result.get("outcome", "success"))
    return ERROR_OUTCOME


__all__ = ["IGNORED_OUTCOME", "ERROR_OUTCOME", "map_webhook_result_to_outcome"]
