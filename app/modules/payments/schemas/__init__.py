# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/__init__.py

Esquemas del módulo Payments.
"""

from .webhook_schemas import GatewayCredentials, PaymentEvent, ReconcileResult

__all__ = ["GatewayCredentials", "PaymentEvent", "ReconcileResult"]
