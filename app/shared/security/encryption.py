# -*- coding: utf-8 -*-
"""
backend/app/shared/security/encryption.py

Cifrado simétrico de secretos de pasarela (AES-256-GCM).

Formato almacenado: ``iv:authTag:ciphertext`` en hexadecimal.
- iv: 16 bytes aleatorios
- authTag: 16 bytes (tag GCM)
- llave: scrypt(ENCRYPTION_KEY, "salt", N=16384, r=8, p=1, 32 bytes)

Los secretos se guardan cifrados en payment_gateway_configs y
whatsapp_instances; este módulo solo los descifra en memoria.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import os
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

_KDF_SALT = b"salt"
_IV_LENGTH = 16
_TAG_LENGTH = 16


class SecretDecryptionError(ValueError):
    """El secreto almacenado no tiene el formato esperado o la llave no corresponde."""


@lru_cache(maxsize=8)
def _derive_key(master_key: str) -> bytes:
    # scrypt es costoso a propósito: una derivación por llave maestra
    kdf = Scrypt(salt=_KDF_SALT, length=32, n=2**14, r=8, p=1)
    return kdf.derive(master_key.encode("utf-8"))


def is_encrypted(value: str | None) -> bool:
    """Indica si `value` tiene la forma iv:tag:ciphertext."""
    if not value:
        return False
    parts = value.split(":")
    if len(parts) != 3:
        return False
    iv_hex, tag_hex, _ = parts
    return len(iv_hex) == _IV_LENGTH * 2 and len(tag_hex) == _TAG_LENGTH * 2


def encrypt_secret(plaintext: str, master_key: str) -> str:
    """Cifra `plaintext` con AES-256-GCM y devuelve iv:tag:ciphertext en hex."""
    iv = os.urandom(_IV_LENGTH)
    sealed = AESGCM(_derive_key(master_key)).encrypt(iv, plaintext.encode("utf-8"), None)
    ciphertext, tag = sealed[:-_TAG_LENGTH], sealed[-_TAG_LENGTH:]
    return f"{iv.hex()}:{tag.hex()}:{ciphertext.hex()}"


def decrypt_secret(encrypted: str, master_key: str) -> str:
    """
    Descifra un secreto en formato iv:tag:ciphertext.

    Raises:
        SecretDecryptionError: formato inválido, llave incorrecta o tag alterado.
    """
    if not master_key:
        raise SecretDecryptionError("ENCRYPTION_KEY no configurada")

    parts = (encrypted or "").split(":")
    if len(parts) != 3:
        raise SecretDecryptionError("Formato de secreto cifrado inválido")

    try:
        iv, tag, ciphertext = (bytes.fromhex(p) for p in parts)
    except ValueError as e:
        raise SecretDecryptionError("Secreto cifrado no es hexadecimal") from e

    if len(iv) != _IV_LENGTH or len(tag) != _TAG_LENGTH:
        raise SecretDecryptionError("Longitud de IV o tag inválida")

    try:
        plaintext = AESGCM(_derive_key(master_key)).decrypt(iv, ciphertext + tag, None)
    except InvalidTag as e:
        raise SecretDecryptionError("No se pudo autenticar el secreto cifrado") from e

    return plaintext.decode("utf-8")


__all__ = [
    "SecretDecryptionError",
    "is_encrypted",
    "encrypt_secret",
    "decrypt_secret",
]

# Fin del archivo backend/app/shared/security/encryption.py
