# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/gateway_config_repository.py

Lecturas de organización y configuración de pasarela.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import PaymentProvider
from app.modules.payments.models import Organization, PaymentGatewayConfig
from app.shared.database.repository import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    def __init__(self) -> None:
        super().__init__(Organization)

    async def get_by_slug(self, session: AsyncSession, slug: str) -> Optional[Organization]:
        result = await session.execute(select(Organization).where(Organization.slug == slug))
        return result.scalar_one_or_none()


class GatewayConfigRepository(BaseRepository[PaymentGatewayConfig]):
    def __init__(self) -> None:
        super().__init__(PaymentGatewayConfig)

    async def get_active(
        self,
        session: AsyncSession,
        organization_id: Optional[str],
        provider: PaymentProvider,
    ) -> Optional[PaymentGatewayConfig]:
        """organization_id=None → configuración de plataforma."""
        stmt = select(PaymentGatewayConfig).where(
            PaymentGatewayConfig.organization_id.is_not_distinct_from(organization_id),
            PaymentGatewayConfig.provider == provider,
            PaymentGatewayConfig.is_active.is_(True),
        )
        result = await session.execute(stmt)
        return result.scalars().first()


__all__ = ["OrganizationRepository", "GatewayConfigRepository"]

# Fin del archivo backend/app/modules/payments/repositories/gateway_config_repository.py
