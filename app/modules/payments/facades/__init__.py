# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/__init__.py

Punto de entrada del paquete de fachadas del módulo Payments.

Para evitar dependencias circulares, este __init__ NO importa submódulos:

    from app.modules.payments.facades.webhooks import handle_payment_webhook

Autor: LandingChat
Fecha: 2026-10-12
"""

__all__: list[str] = []

# Fin del archivo backend/app/modules/payments/facades/__init__.py
