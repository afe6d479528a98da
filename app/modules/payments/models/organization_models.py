# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/organization_models.py

Organización (tenant). Solo se lee aquí: el slug del query param `org`
de los webhooks se resuelve a organization_id.

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<Organization id={self.id} slug={self.slug}>"

# Fin del archivo backend/app/modules/payments/models/organization_models.py
