# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/__init__.py

Módulo de ingesta de webhooks de WhatsApp (Evolution API y Meta Cloud).

Estructura:
- enums: proveedor, estado de instancia, tipo de evento
- models: WhatsAppInstance
- schemas: MessagingEvent
- repositories: lecturas de instancia + compare-and-set de estado
- services: normalización de envelopes y aplicación de eventos
- facades: tabla de proveedores + orquestación del webhook
- routes: /webhooks/whatsapp y /webhooks/whatsapp/meta

Este __init__ no importa submódulos para evitar dependencias circulares.

Autor: LandingChat
Fecha: 2026-10-12
"""
__all__ = []
