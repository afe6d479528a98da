# -*- coding: utf-8 -*-
"""
Tests de resolución de referencias (orden / suscripción).

- La referencia de orden se compara por igualdad exacta
- El id corto SUB-xxxxxxxx no es llave única: la ambigüedad no se adivina
- El formato legado sub_{uuid}_{ts} resuelve por id completo
"""

import uuid

import pytest

from app.modules.payments.enums import PaymentProvider, PaymentStatus
from app.modules.payments.models import PaymentTransaction
from app.modules.payments.schemas import PaymentEvent
from app.modules.payments.services.webhooks.errors import ReferenceNotFound
from app.modules.payments.services.webhooks.reference_resolver import (
    ENTITY_ORDER,
    ENTITY_SUBSCRIPTION,
    ReferenceResolver,
    build_subscription_reference,
    is_subscription_reference,
    parse_subscription_reference,
)
from tests.factories import create_order, create_organization, create_subscription


def _event(reference: str, tx_id: str = "tx-1") -> PaymentEvent:
    return PaymentEvent(
        provider=PaymentProvider.WOMPI,
        event_type="transaction.updated",
        provider_transaction_id=tx_id,
        provider_reference=reference,
        status=PaymentStatus.APPROVED,
    )


class TestReferenceParsing:
    def test_current_subscription_format(self):
        parsed = parse_subscription_reference("SUB-ABCDEF12-1760263200000-a1b2")
        assert parsed.short_id == "abcdef12"
        assert parsed.full_id is None

    def test_legacy_subscription_format(self):
        full_id = "abcdef12-3456-4789-8abc-def012345678"
        parsed = parse_subscription_reference(f"sub_{full_id}_1760263200")
        assert parsed.full_id == full_id
        assert parsed.short_id is None

    @pytest.mark.parametrize(
        "reference",
        ["ORD-1001", "", None, "SUB-xyz", "SUB-abcdef12", "sub_no-es-uuid_123", "SUB-abcdef1-123-a"],
    )
    def test_non_subscription_references(self, reference):
        assert parse_subscription_reference(reference) is None
        assert is_subscription_reference(reference) is False

    def test_build_subscription_reference(self):
        subscription_id = "abcdef12-3456-4789-8abc-def012345678"
        reference = build_subscription_reference(subscription_id, timestamp_ms=1760263200000, suffix="a1b2")
        assert reference == "SUB-abcdef12-1760263200000-a1b2"
        assert parse_subscription_reference(reference).short_id == "abcdef12"


class TestOrderResolution:
    async def test_exact_reference_resolves(self, db):
        org = await create_organization(db)
        order = await create_order(db, org.id, payment_reference="ORD-1001")

        lookup = await ReferenceResolver().resolve(db, _event("ORD-1001"), org.id)

        assert lookup.entity_type == ENTITY_ORDER
        assert lookup.entity_id == order.id
        assert lookup.organization_id == org.id

    @pytest.mark.parametrize("reference", ["ord-1001", "ORD-100", "ORD-1001 ", "ORD-10011"])
    async def test_near_matches_do_not_resolve(self, db, reference):
        org = await create_organization(db)
        await create_order(db, org.id, payment_reference="ORD-1001")

        with pytest.raises(ReferenceNotFound):
            await ReferenceResolver().resolve(db, _event(reference), org.id)

    async def test_order_of_another_organization_is_not_resolved(self, db):
        owner = await create_organization(db, slug="duena")
        other = await create_organization(db, slug="otra")
        await create_order(db, owner.id, payment_reference="ORD-1001")

        with pytest.raises(ReferenceNotFound):
            await ReferenceResolver().resolve(db, _event("ORD-1001"), other.id)

    async def test_order_reference_without_organization(self, db):
        with pytest.raises(ReferenceNotFound):
            await ReferenceResolver().resolve(db, _event("ORD-1001"), None)


class TestSubscriptionResolution:
    async def test_unique_short_id_resolves(self, db):
        org = await create_organization(db)
        subscription = await create_subscription(db, org.id)
        reference = build_subscription_reference(subscription.id)

        lookup = await ReferenceResolver().resolve(db, _event(reference), None)

        assert lookup.entity_type == ENTITY_SUBSCRIPTION
        assert lookup.entity_id == subscription.id
        assert lookup.organization_id == org.id

    async def test_legacy_reference_resolves_by_full_id(self, db):
        org = await create_organization(db)
        subscription = await create_subscription(db, org.id)

        lookup = await ReferenceResolver().resolve(db, _event(f"sub_{subscription.id}_1760263200"), None)

        assert lookup.entity_id == subscription.id

    async def test_unknown_short_id(self, db):
        org = await create_organization(db)
        await create_subscription(db, org.id, subscription_id="11111111-0000-4000-8000-000000000001")

        with pytest.raises(ReferenceNotFound):
            await ReferenceResolver().resolve(db, _event("SUB-22222222-1760263200000-a1b2"), None)

    async def test_ambiguous_short_id_is_not_guessed(self, db):
        org = await create_organization(db)
        await create_subscription(db, org.id, subscription_id="abcdef12-0000-4000-8000-000000000001")
        await create_subscription(db, org.id, subscription_id="abcdef12-0000-4000-8000-000000000002")

        with pytest.raises(ReferenceNotFound):
            await ReferenceResolver().resolve(db, _event("SUB-abcdef12-1760263200000-a1b2"), None)

    async def test_ambiguous_short_id_uses_existing_ledger_link(self, db):
        org = await create_organization(db)
        await create_subscription(db, org.id, subscription_id="abcdef12-0000-4000-8000-000000000001")
        second = await create_subscription(db, org.id, subscription_id="abcdef12-0000-4000-8000-000000000002")
        db.add(
            PaymentTransaction(
                id=str(uuid.uuid4()),
                organization_id=org.id,
                provider=PaymentProvider.WOMPI,
                provider_transaction_id="tx-linked",
                subscription_id=second.id,
                status=PaymentStatus.PENDING,
            )
        )
        await db.commit()

        lookup = await ReferenceResolver().resolve(
            db, _event("SUB-abcdef12-1760263200000-a1b2", tx_id="tx-linked"), None
        )

        assert lookup.entity_id == second.id
