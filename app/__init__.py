# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Paquete principal 'app' del servicio de webhooks de LandingChat.

Los módulos internos se importan como 'app.*'; este inicializador no
importa nada para que los tests puedan cargar submódulos sin efectos
secundarios (engine, logging).

Autor: LandingChat
Fecha: 2026-10-12
"""

# Fin del archivo backend/app/__init__.py
