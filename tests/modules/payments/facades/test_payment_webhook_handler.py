# -*- coding: utf-8 -*-
"""
Tests de handle_payment_webhook (sin capa HTTP).

Cubre la traducción de errores a respuestas, el rollback ante fallo de
persistencia, la política de bypass de firma y la auditoría en todo camino.
"""

import logging
from http import HTTPStatus
from unittest.mock import AsyncMock

import pytest

from app.modules.payments.enums import PaymentProvider, WebhookOutcome
from app.modules.payments.facades.webhooks import (
    PAYMENT_PROVIDERS,
    allow_insecure_webhooks,
    get_payment_adapter,
    handle_payment_webhook,
)
from app.modules.payments.services.webhooks.errors import PersistenceFailure, UnsupportedProvider
from app.shared.config.settings_webhooks import WebhooksSettings, reset_webhooks_settings
from tests.factories import (
    DEEPLY_NESTED_JSON,
    create_gateway_config,
    create_order,
    create_organization,
    ledger_rows,
    webhook_logs,
    wompi_body,
)

JSON_HEADERS = {"Content-Type": "application/json"}


class TestProviderTable:
    def test_payment_providers(self):
        assert set(PAYMENT_PROVIDERS) == {PaymentProvider.WOMPI, PaymentProvider.EPAYCO}

    @pytest.mark.parametrize("provider", [None, PaymentProvider.META_CLOUD])
    def test_unsupported_provider(self, provider):
        with pytest.raises(UnsupportedProvider):
            get_payment_adapter(provider)

    def test_event_type_extraction(self):
        assert PAYMENT_PROVIDERS[PaymentProvider.WOMPI].event_type({"event": "transaction.updated"}) == "transaction.updated"
        assert PAYMENT_PROVIDERS[PaymentProvider.EPAYCO].event_type({"x_ref_payco": "1"}) == "confirmation"


class TestAllowInsecureWebhooks:
    def test_disabled_by_default(self):
        assert allow_insecure_webhooks(WebhooksSettings(allow_insecure_webhooks=False, environment="development")) is False

    def test_enabled_only_in_development(self):
        assert allow_insecure_webhooks(WebhooksSettings(allow_insecure_webhooks=True, environment="development")) is True

    @pytest.mark.parametrize("environment", ["production", "testing", "staging"])
    def test_ignored_outside_development(self, environment, caplog):
        settings = WebhooksSettings(allow_insecure_webhooks=True, environment=environment)
        with caplog.at_level(logging.ERROR, logger="app.modules.payments.facades.webhooks.providers"):
            assert allow_insecure_webhooks(settings) is False
        assert any("SECURITY VIOLATION" in r.getMessage() for r in caplog.records)


class TestHandlePaymentWebhook:
    async def _seed(self, db):
        org = await create_organization(db)
        await create_order(db, org.id)
        await create_gateway_config(db, PaymentProvider.WOMPI, organization_id=org.id)
        return org

    async def test_success_body_and_audit(self, db, session_factory):
        org = await self._seed(db)

        result = await handle_payment_webhook(
            db,
            session_factory=session_factory,
            provider_name="wompi",
            org_slug=org.slug,
            raw_body=wompi_body(),
            headers=JSON_HEADERS,
        )

        assert result.status_code == HTTPStatus.OK
        assert result.body["received"] is True
        assert result.body["reconcile"]["outcome"] == "applied"
        assert result.body["reconcile"]["transition_applied"] is True
        (log,) = await webhook_logs(db)
        assert log.outcome == WebhookOutcome.SUCCESS
        assert log.organization_id == org.id
        assert log.http_status == 200

    async def test_persistence_failure_rolls_back_and_returns_500(self, db, session_factory):
        org = await self._seed(db)
        reconciler = AsyncMock()
        reconciler.reconcile.side_effect = PersistenceFailure("Upsert del ledger falló: OperationalError")
        db.rollback = AsyncMock(wraps=db.rollback)

        result = await handle_payment_webhook(
            db,
            session_factory=session_factory,
            provider_name="wompi",
            org_slug=org.slug,
            raw_body=wompi_body(),
            headers=JSON_HEADERS,
            reconciler=reconciler,
        )

        assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert result.body == {"error": "Internal server error"}
        db.rollback.assert_awaited()
        assert await ledger_rows(db) == []
        (log,) = await webhook_logs(db)
        assert log.outcome == WebhookOutcome.ERROR
        assert log.http_status == 500
        assert "OperationalError" in log.error_message

    async def test_unexpected_error_is_audited_as_generic_500(self, db, session_factory):
        org = await self._seed(db)
        reconciler = AsyncMock()
        reconciler.reconcile.side_effect = RuntimeError("estado interno roto")
        db.rollback = AsyncMock(wraps=db.rollback)

        result = await handle_payment_webhook(
            db,
            session_factory=session_factory,
            provider_name="wompi",
            org_slug=org.slug,
            raw_body=wompi_body(),
            headers=JSON_HEADERS,
            reconciler=reconciler,
        )

        assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert result.body == {"error": "Internal server error"}
        db.rollback.assert_awaited()
        (log,) = await webhook_logs(db)
        assert log.outcome == WebhookOutcome.ERROR
        assert log.http_status == 500
        assert "RuntimeError" in log.error_message
        assert "estado interno roto" not in str(result.body)

    async def test_deeply_nested_body_is_rejected_as_invalid_payload(self, db, session_factory):
        org = await self._seed(db)

        result = await handle_payment_webhook(
            db,
            session_factory=session_factory,
            provider_name="wompi",
            org_slug=org.slug,
            raw_body=DEEPLY_NESTED_JSON,
            headers=JSON_HEADERS,
        )

        assert result.status_code == HTTPStatus.BAD_REQUEST
        assert result.body == {"error": "Invalid payload"}
        (log,) = await webhook_logs(db)
        assert log.http_status == 400

    async def test_audit_failure_does_not_change_response(self, db, session_factory):
        org = await self._seed(db)

        def broken_factory():
            raise RuntimeError("sin conexiones")

        result = await handle_payment_webhook(
            db,
            session_factory=broken_factory,
            provider_name="wompi",
            org_slug=org.slug,
            raw_body=wompi_body(),
            headers=JSON_HEADERS,
        )

        assert result.status_code == HTTPStatus.OK
        assert result.body["reconcile"]["outcome"] == "applied"

    async def test_insecure_mode_skips_verification_in_development(self, db, session_factory, monkeypatch):
        org = await self._seed(db)
        monkeypatch.setenv("ALLOW_INSECURE_WEBHOOKS", "true")
        monkeypatch.setenv("ENVIRONMENT", "development")
        reset_webhooks_settings()

        result = await handle_payment_webhook(
            db,
            session_factory=session_factory,
            provider_name="wompi",
            org_slug=org.slug,
            raw_body=wompi_body(secret="firmado-con-otro"),
            headers=JSON_HEADERS,
        )

        assert result.status_code == HTTPStatus.OK

    async def test_insecure_flag_is_ignored_in_production(self, db, session_factory, monkeypatch):
        org = await self._seed(db)
        monkeypatch.setenv("ALLOW_INSECURE_WEBHOOKS", "true")
        monkeypatch.setenv("ENVIRONMENT", "production")
        reset_webhooks_settings()

        result = await handle_payment_webhook(
            db,
            session_factory=session_factory,
            provider_name="wompi",
            org_slug=org.slug,
            raw_body=wompi_body(secret="firmado-con-otro"),
            headers=JSON_HEADERS,
        )

        assert result.status_code == HTTPStatus.UNAUTHORIZED
        assert await ledger_rows(db) == []
