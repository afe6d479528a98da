# -*- coding: utf-8 -*-
"""
backend/app/shared/__init__.py

Infraestructura compartida del servicio de webhooks:
- config: settings (pydantic-settings) y logging
- database: engine async, Base declarativa y repositorio base
- security: cifrado de secretos de pasarela

No importa submódulos; cada consumidor importa lo que necesita.

Autor: LandingChat
Fecha: 2026-10-12
"""

# Fin del archivo backend/app/shared/__init__.py
