# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/webhook_schemas.py

DTOs del flujo de webhooks de pago.

- PaymentEvent: evento normalizado (transitorio), independiente del proveedor
- GatewayCredentials: credenciales descifradas de una pasarela
- ReconcileResult: resultado de la conciliación, consumido por
  notificaciones/dashboards

Autor: LandingChat
Fecha: 2026-10-12
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.payments.enums import PaymentProvider, PaymentStatus, ReconcileOutcome


class PaymentEvent(BaseModel):
    """
    Evento de pago normalizado.

    provider_transaction_id es la llave de idempotencia: único por proveedor.
    """

    model_config = ConfigDict(frozen=True)

    provider: PaymentProvider = Field(description="Proveedor origen")
    event_type: str = Field(description="Tipo de evento original (transaction.updated, confirmation, ...)")
    provider_transaction_id: str = Field(min_length=1, description="ID de la transacción en el proveedor")
    provider_reference: str = Field(default="", description="Referencia generada por nosotros y devuelta por el proveedor")
    status: PaymentStatus = Field(description="Estado homologado")
    amount_minor_units: int = Field(default=0, ge=0, description="Monto en centavos")
    currency: str = Field(default="COP", description="Código ISO 4217")
    payment_method: Optional[str] = Field(default=None)
    occurred_at: Optional[datetime] = Field(default=None, description="Timestamp del proveedor")
    raw_payload: Dict[str, Any] = Field(default_factory=dict, repr=False)


class GatewayCredentials(BaseModel):
    """
    Credenciales descifradas de una pasarela.

    Wompi: integrity_secret = secreto de eventos.
    ePayco: integrity_secret = P_CUST_ID_CLIENTE, encryption_key = P_KEY.
    """

    model_config = ConfigDict(frozen=True)

    provider: PaymentProvider
    organization_id: Optional[str] = None
    public_key: Optional[str] = None
    private_key: Optional[str] = Field(default=None, repr=False)
    integrity_secret: Optional[str] = Field(default=None, repr=False)
    encryption_key: Optional[str] = Field(default=None, repr=False)
    is_test_mode: bool = True


@dataclass(frozen=True)
class ReconcileResult:
    ledger_row_id: str
    domain_entity_id: Optional[str]
    entity_type: str
    transition_applied: bool
    final_status: str
    outcome: ReconcileOutcome

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ledger_row_id": self.ledger_row_id,
            "domain_entity_id": self.domain_entity_id,
            "entity_type": self.entity_type,
            "transition_applied": self.transition_applied,
            "final_status": str(self.final_status),
            "outcome": self.outcome.value,
        }


__all__ = ["PaymentEvent", "GatewayCredentials", "ReconcileResult"]

# Fin del archivo backend/app/modules/payments/schemas/webhook_schemas.py
