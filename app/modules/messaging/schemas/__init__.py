# -*- coding: utf-8 -*-
"""
backend/app/modules/messaging/schemas/__init__.py
"""

from .messaging_schemas import MessagingEvent

__all__ = ["MessagingEvent"]
