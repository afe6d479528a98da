# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/__init__.py

Módulo de webhooks de pago de LandingChat.

Este módulo gestiona:
- Verificación de firmas de Wompi y ePayco
- Normalización de payloads a PaymentEvent
- Conciliación idempotente del ledger (payment_transactions) con
  órdenes y suscripciones
- Auditoría de cada webhook recibido (webhook_logs)

Estructura:
- enums: Tipos de datos y tablas de transición de estado
- models: Modelos ORM (PaymentTransaction, Order, Subscription, ...)
- schemas: PaymentEvent, GatewayCredentials, ReconcileResult
- repositories: Acceso a datos (upsert del ledger, compare-and-set)
- services: Lógica de bajo nivel (firmas, normalización, conciliación)
- facades: Orquestación del webhook (tabla de proveedores + handler)
- routes: POST /webhooks/payments/{provider}

Este __init__ no importa submódulos para evitar dependencias circulares.

Autor: LandingChat
Fecha: 2026-10-12
"""
__all__ = []
