# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/gateway_config_provider.py

Proveedor de configuración de pasarelas (único punto de lectura de secretos).

Política de caché:
- Llave: (slug de organización | plataforma, proveedor)
- TTL: GATEWAY_CONFIG_CACHE_TTL_SECONDS (0 desactiva la caché)
- Se cachean credenciales ya descifradas; nunca estado de entregas
- invalidate() descarta entradas (p. ej. tras editar la configuración)

Los verificadores de firma reciben los secretos como argumento, así que
siguen siendo puros y testeables sin BD.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import PaymentProvider
from app.modules.payments.repositories import GatewayConfigRepository, OrganizationRepository
from app.modules.payments.schemas import GatewayCredentials
from app.shared.config.settings_webhooks import get_webhooks_settings
from app.shared.security.encryption import SecretDecryptionError, decrypt_secret, is_encrypted

from .webhooks.errors import GatewayMisconfigured, GatewayNotConfigured, OrganizationNotFound

logger = logging.getLogger(__name__)

PLATFORM_SCOPE = "__platform__"

# =============================================================================
# CACHE (TTL-based, in-memory, por réplica)
# =============================================================================

_gateway_config_cache: Dict[Tuple[str, str], Tuple[GatewayCredentials, float]] = {}


def _cache_key(org_slug: Optional[str], provider: PaymentProvider) -> Tuple[str, str]:
    return (org_slug or PLATFORM_SCOPE, provider.value)


def _get_cached(key: Tuple[str, str]) -> Optional[GatewayCredentials]:
    """Retorna credenciales si aún son válidas, None si expiraron o no existen."""
    entry = _gateway_config_cache.get(key)
    if entry is None:
        return None
    credentials, expires_at = entry
    if time.monotonic() >= expires_at:
        _gateway_config_cache.pop(key, None)
        return None
    return credentials


def _set_cached(key: Tuple[str, str], credentials: GatewayCredentials, ttl_seconds: int) -> None:
    if ttl_seconds <= 0:
        return
    _gateway_config_cache[key] = (credentials, time.monotonic() + ttl_seconds)


def clear_gateway_config_cache() -> None:
    """Limpia la caché completa (útil para tests)."""
    _gateway_config_cache.clear()


class GatewayConfigProvider:
    """Resuelve (org_slug, proveedor) → GatewayCredentials descifradas."""

    def __init__(
        self,
        organization_repo: Optional[OrganizationRepository] = None,
        config_repo: Optional[GatewayConfigRepository] = None,
        ttl_seconds: Optional[int] = None,
        master_key: Optional[str] = None,
    ) -> None:
        settings = get_webhooks_settings()
        self.organization_repo = organization_repo or OrganizationRepository()
        self.config_repo = config_repo or GatewayConfigRepository()
        self.ttl_seconds = settings.gateway_config_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.master_key = master_key if master_key is not None else settings.encryption_key

    async def resolve_organization_id(self, session: AsyncSession, org_slug: Optional[str]) -> Optional[str]:
        """
        None → plataforma.

        Raises:
            OrganizationNotFound
        """
        if not org_slug:
            return None
        organization = await self.organization_repo.get_by_slug(session, org_slug)
        if organization is None:
            raise OrganizationNotFound(f"Organización '{org_slug}' no existe")
        return organization.id

    async def get(
        self,
        session: AsyncSession,
        org_slug: Optional[str],
        provider: PaymentProvider,
    ) -> GatewayCredentials:
        """
        Raises:
            OrganizationNotFound: el slug no existe.
            GatewayNotConfigured: no hay configuración activa para el proveedor.
            GatewayMisconfigured: un secreto almacenado no se pudo descifrar.
        """
        key = _cache_key(org_slug, provider)
        cached = _get_cached(key)
        if cached is not None:
            return cached

        organization_id = await self.resolve_organization_id(session, org_slug)
        config = await self.config_repo.get_active(session, organization_id, provider)
        if config is None:
            raise GatewayNotConfigured(
                f"Sin configuración activa de {provider.value} para {org_slug or PLATFORM_SCOPE}"
            )

        credentials = GatewayCredentials(
            provider=provider,
            organization_id=organization_id,
            public_key=config.public_key,
            private_key=self._reveal(config.private_key_encrypted, provider, org_slug),
            integrity_secret=self._reveal(config.integrity_secret_encrypted, provider, org_slug),
            encryption_key=self._reveal(config.encryption_key_encrypted, provider, org_slug),
            is_test_mode=config.is_test_mode,
        )
        _set_cached(key, credentials, self.ttl_seconds)
        return credentials

    def invalidate(self, org_slug: Optional[str] = None, provider: Optional[PaymentProvider] = None) -> None:
        """Sin argumentos limpia todo; con argumentos, solo las entradas que coinciden."""
        if org_slug is None and provider is None:
            clear_gateway_config_cache()
            return
        for scope, provider_value in list(_gateway_config_cache):
            if org_slug is not None and scope != org_slug:
                continue
            if provider is not None and provider_value != provider.value:
                continue
            _gateway_config_cache.pop((scope, provider_value), None)

    def _reveal(self, stored: Optional[str], provider: PaymentProvider, org_slug: Optional[str]) -> Optional[str]:
        if not stored:
            return None
        # filas anteriores al cifrado guardan el valor en claro
        if not is_encrypted(stored):
            return stored
        try:
            return decrypt_secret(stored, self.master_key or "")
        except SecretDecryptionError as e:
            logger.error(
                "gateway_secret_decrypt_failed provider=%s org=%s reason=%s",
                provider.value,
                org_slug or PLATFORM_SCOPE,
                e,
            )
            raise GatewayMisconfigured(str(e)) from e


__all__ = [
    "PLATFORM_SCOPE",
    "GatewayConfigProvider",
    "clear_gateway_config_cache",
]

# Fin del archivo backend/app/modules/payments/services/gateway_config_provider.py
