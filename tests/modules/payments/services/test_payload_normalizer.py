# -*- coding: utf-8 -*-
"""
Tests de normalización de payloads Wompi / ePayco a PaymentEvent.
"""

import json
from datetime import datetime, timezone
from urllib.parse import urlencode

import pytest
from pydantic import ValidationError

from app.modules.payments.enums import PaymentProvider, PaymentStatus
from app.modules.payments.services.webhooks.payload_normalizer import (
    WebhookNormalizationError,
    map_epayco_status,
    map_wompi_status,
    normalize_epayco,
    normalize_wompi,
    parse_webhook_body,
)
from tests.factories import DEEPLY_NESTED_JSON, FORM_CONTENT_TYPE, build_epayco_fields, build_wompi_payload


class TestParseWebhookBody:
    def test_json_object(self):
        assert parse_webhook_body(b'{"a": 1}', "application/json") == {"a": 1}

    def test_form_urlencoded(self):
        body = urlencode({"x_ref_payco": "1", "x_amount": "10.00"}).encode()
        assert parse_webhook_body(body, FORM_CONTENT_TYPE + "; charset=utf-8") == {
            "x_ref_payco": "1",
            "x_amount": "10.00",
        }

    @pytest.mark.parametrize("raw", [b"", b"{no-json", b"[1, 2, 3]", b'"texto"', DEEPLY_NESTED_JSON])
    def test_invalid_bodies_raise(self, raw):
        with pytest.raises(WebhookNormalizationError):
            parse_webhook_body(raw, "application/json")


class TestStatusMaps:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("APPROVED", PaymentStatus.APPROVED),
            ("approved", PaymentStatus.APPROVED),
            ("DECLINED", PaymentStatus.DECLINED),
            ("VOIDED", PaymentStatus.VOIDED),
            ("ERROR", PaymentStatus.ERROR),
            ("PENDING", PaymentStatus.PENDING),
            ("SOMETHING_NEW", PaymentStatus.PENDING),
            (None, PaymentStatus.PENDING),
        ],
    )
    def test_wompi(self, raw, expected):
        assert map_wompi_status(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1", PaymentStatus.APPROVED),
            (1, PaymentStatus.APPROVED),
            ("2", PaymentStatus.DECLINED),
            ("3", PaymentStatus.PENDING),
            ("4", PaymentStatus.ERROR),
            ("6", PaymentStatus.VOIDED),
            ("9", PaymentStatus.PENDING),
            (None, PaymentStatus.PENDING),
        ],
    )
    def test_epayco(self, raw, expected):
        assert map_epayco_status(raw) == expected


class TestNormalizeWompi:
    def test_transaction_updated(self):
        event = normalize_wompi(build_wompi_payload(tx_id="tx-9", reference="ORD-9", amount_in_cents=250000))

        assert event.provider == PaymentProvider.WOMPI
        assert event.event_type == "transaction.updated"
        assert event.provider_transaction_id == "tx-9"
        assert event.provider_reference == "ORD-9"
        assert event.status == PaymentStatus.APPROVED
        assert event.amount_minor_units == 250000
        assert event.currency == "COP"
        assert event.payment_method == "CARD"
        assert event.occurred_at == datetime(2026, 10, 12, 10, 0, tzinfo=timezone.utc)

    def test_other_events_are_not_actionable(self):
        assert normalize_wompi(build_wompi_payload(event="nequi_token.updated")) is None

    def test_missing_event_with_transaction_is_transaction_updated(self):
        event = normalize_wompi(build_wompi_payload(event=None, tx_id="tx-sin-evento"))

        assert event.event_type == "transaction.updated"
        assert event.provider_transaction_id == "tx-sin-evento"

    def test_missing_event_without_transaction_is_not_actionable(self):
        assert normalize_wompi({"data": {}, "timestamp": 1760263200}) is None

    def test_missing_transaction_id_raises(self):
        payload = build_wompi_payload()
        payload["data"]["transaction"].pop("id")
        with pytest.raises(WebhookNormalizationError):
            normalize_wompi(payload)

    def test_invalid_amount_raises(self):
        payload = build_wompi_payload()
        payload["data"]["transaction"]["amount_in_cents"] = "mucho"
        with pytest.raises(WebhookNormalizationError):
            normalize_wompi(payload)

    def test_event_is_immutable(self):
        event = normalize_wompi(build_wompi_payload())
        with pytest.raises(ValidationError):
            event.status = PaymentStatus.DECLINED  # type: ignore[misc]


class TestNormalizeEpayco:
    def test_confirmation_from_form_fields(self):
        event = normalize_epayco(build_epayco_fields(ref_payco="777", invoice="ORD-7", cod_response="2"))

        assert event.provider == PaymentProvider.EPAYCO
        assert event.event_type == "confirmation"
        assert event.provider_transaction_id == "777"
        assert event.provider_reference == "ORD-7"
        assert event.status == PaymentStatus.DECLINED
        assert event.amount_minor_units == 150000
        assert event.payment_method == "VS"

    def test_reference_falls_back_to_extra1(self):
        fields = build_epayco_fields()
        fields.pop("x_id_invoice")
        fields["x_extra1"] = "SUB-abcdef12-1760263200000-a1b2"
        assert normalize_epayco(fields).provider_reference == "SUB-abcdef12-1760263200000-a1b2"

    def test_json_confirmation(self):
        payload = json.loads(json.dumps(build_epayco_fields()))
        assert normalize_epayco(payload).status == PaymentStatus.APPROVED

    def test_missing_ref_payco_raises(self):
        fields = build_epayco_fields()
        fields.pop("x_ref_payco")
        with pytest.raises(WebhookNormalizationError):
            normalize_epayco(fields)

    def test_invalid_amount_raises(self):
        fields = build_epayco_fields()
        fields["x_amount"] = "abc"
        with pytest.raises(WebhookNormalizationError):
            normalize_epayco(fields)
