# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/__init__.py

Superficie de exportación de servicios del módulo Payments.

Incluye:
- GatewayConfigProvider
- ReconciliationService
- WebhookAuditLogger

Autor: LandingChat
Fecha: 2026-10-12
"""

from .gateway_config_provider import GatewayConfigProvider, clear_gateway_config_cache
from .reconciliation_service import ReconciliationService
from .webhook_audit_service import WebhookAuditLogger

__all__ = [
    "GatewayConfigProvider",
    "clear_gateway_config_cache",
    "ReconciliationService",
    "WebhookAuditLogger",
]

# Fin del archivo backend/app/modules/payments/services/__init__.py
