# -*- coding: utf-8 -*-
"""
backend/app/shared/security/__init__.py

Utilidades de seguridad compartidas.
"""

from .encryption import SecretDecryptionError, decrypt_secret, encrypt_secret, is_encrypted

__all__ = [
    "SecretDecryptionError",
    "decrypt_secret",
    "encrypt_secret",
    "is_encrypted",
]
