# -*- coding: utf-8 -*-
"""
Tests de verificación de firmas: Wompi, ePayco y HMAC de mensajería.

Cubre:
- Firma válida / alterada en un solo byte
- Propiedades ausentes en Wompi (se omiten, no son error)
- Checksum Wompi en mayúsculas o minúsculas
- Fallo cerrado sin secreto
- Comparación en tiempo constante (tolerancia amplia)
"""

import hashlib
import hmac
import json
import statistics
import time

import pytest

from app.modules.payments.services.webhooks.signature_verification import (
    build_hmac_signature_header,
    compute_epayco_signature,
    compute_wompi_checksum,
    constant_time_equals,
    verify_epayco_payload,
    verify_hmac_signature,
    verify_optional_hmac_signature,
    verify_wompi_payload,
    verify_wompi_signature,
)
from tests.factories import (
    DEEPLY_NESTED_JSON,
    EPAYCO_CUSTOMER_ID,
    EPAYCO_P_KEY,
    WOMPI_SECRET,
    build_epayco_fields,
    build_wompi_payload,
)


def _flip_last_char(value: str) -> str:
    last = value[-1]
    return value[:-1] + ("0" if last != "0" else "1")


class TestWompiSignature:
    """Checksum SHA-256 de propiedades + timestamp + secreto."""

    def test_checksum_matches_manual_concatenation(self):
        payload = build_wompi_payload(tx_id="tx-1", status="APPROVED", amount_in_cents=4990000)
        expected = hashlib.sha256(f"tx-1APPROVED4990000{payload['timestamp']}{WOMPI_SECRET}".encode()).hexdigest()
        assert compute_wompi_checksum(payload, WOMPI_SECRET) == expected

    @pytest.mark.parametrize("timestamp,rendered", [(None, "null"), (1760263200.0, "1760263200")])
    def test_timestamp_rendering(self, timestamp, rendered):
        payload = build_wompi_payload(tx_id="tx-1", status="APPROVED", amount_in_cents=4990000)
        payload["timestamp"] = timestamp
        expected = hashlib.sha256(f"tx-1APPROVED4990000{rendered}{WOMPI_SECRET}".encode()).hexdigest()
        assert compute_wompi_checksum(payload, WOMPI_SECRET) == expected

    def test_missing_timestamp_renders_undefined(self):
        payload = build_wompi_payload(tx_id="tx-1", status="APPROVED", amount_in_cents=4990000)
        del payload["timestamp"]
        expected = hashlib.sha256(f"tx-1APPROVED4990000undefined{WOMPI_SECRET}".encode()).hexdigest()
        assert compute_wompi_checksum(payload, WOMPI_SECRET) == expected

    def test_valid_signature_accepted(self):
        raw = json.dumps(build_wompi_payload()).encode()
        assert verify_wompi_signature(raw, {}, WOMPI_SECRET) is True

    def test_uppercase_checksum_accepted(self):
        raw = json.dumps(build_wompi_payload(uppercase_checksum=True)).encode()
        assert verify_wompi_signature(raw, {}, WOMPI_SECRET) is True

    def test_mixed_case_checksum_rejected(self):
        payload = build_wompi_payload()
        checksum = payload["signature"]["checksum"]
        payload["signature"]["checksum"] = checksum[:10].upper() + checksum[10:]
        if payload["signature"]["checksum"] == checksum:
            pytest.skip("el prefijo no contiene letras hex")
        assert verify_wompi_payload(payload, WOMPI_SECRET) is False

    def test_single_byte_mutation_in_checksum_rejected(self):
        payload = build_wompi_payload()
        payload["signature"]["checksum"] = _flip_last_char(payload["signature"]["checksum"])
        assert verify_wompi_payload(payload, WOMPI_SECRET) is False

    def test_tampered_amount_rejected(self):
        payload = build_wompi_payload(amount_in_cents=150000)
        payload["data"]["transaction"]["amount_in_cents"] = 150001
        assert verify_wompi_payload(payload, WOMPI_SECRET) is False

    def test_wrong_secret_rejected(self):
        raw = json.dumps(build_wompi_payload()).encode()
        assert verify_wompi_signature(raw, {}, "otro-secreto") is False

    def test_missing_property_is_skipped(self):
        payload = build_wompi_payload()
        payload["signature"]["properties"].append("transaction.shipping_address")
        payload["signature"]["checksum"] = compute_wompi_checksum(payload, WOMPI_SECRET)
        assert verify_wompi_payload(payload, WOMPI_SECRET) is True

    @pytest.mark.parametrize("secret", [None, ""])
    def test_fails_closed_without_secret(self, secret):
        raw = json.dumps(build_wompi_payload()).encode()
        assert verify_wompi_signature(raw, {}, secret) is False

    @pytest.mark.parametrize(
        "raw",
        [b"", b"no-json", b"[1, 2]", DEEPLY_NESTED_JSON, json.dumps({"event": "transaction.updated"}).encode()],
    )
    def test_malformed_body_never_raises(self, raw):
        assert verify_wompi_signature(raw, {}, WOMPI_SECRET) is False


class TestEpaycoSignature:
    """SHA-256 de cust_id + p_key + ref_payco + transaction_id + amount + currency."""

    def test_signature_matches_manual_concatenation(self):
        fields = build_epayco_fields(ref_payco="555", amount="1500.00")
        expected = hashlib.sha256(
            f"{EPAYCO_CUSTOMER_ID}{EPAYCO_P_KEY}555TX-5551500.00COP".encode()
        ).hexdigest()
        assert compute_epayco_signature(fields, EPAYCO_CUSTOMER_ID, EPAYCO_P_KEY) == expected

    def test_valid_signature_accepted(self):
        assert verify_epayco_payload(build_epayco_fields(), EPAYCO_CUSTOMER_ID, EPAYCO_P_KEY) is True

    def test_tampered_field_rejected(self):
        fields = build_epayco_fields()
        fields["x_amount"] = "1.00"
        assert verify_epayco_payload(fields, EPAYCO_CUSTOMER_ID, EPAYCO_P_KEY) is False

    @pytest.mark.parametrize("customer_id,p_key", [(None, EPAYCO_P_KEY), (EPAYCO_CUSTOMER_ID, None), ("", "")])
    def test_fails_closed_without_credentials(self, customer_id, p_key):
        assert verify_epayco_payload(build_epayco_fields(), customer_id, p_key) is False

    def test_missing_signature_rejected(self):
        fields = build_epayco_fields()
        fields.pop("x_signature")
        assert verify_epayco_payload(fields, EPAYCO_CUSTOMER_ID, EPAYCO_P_KEY) is False


class TestHmacSignature:
    """Header `sha256=<hex>` sobre el body crudo."""

    body = b'{"event":"messages.upsert","instance":"demo"}'

    def test_round_trip(self):
        header = build_hmac_signature_header("s3cret", self.body)
        assert header == "sha256=" + hmac.new(b"s3cret", self.body, hashlib.sha256).hexdigest()
        assert verify_hmac_signature(self.body, header, "s3cret") is True

    def test_every_single_byte_mutation_of_body_rejected(self):
        header = build_hmac_signature_header("s3cret", self.body)
        for i in range(len(self.body)):
            mutated = bytearray(self.body)
            mutated[i] ^= 0x01
            assert verify_hmac_signature(bytes(mutated), header, "s3cret") is False

    def test_strict_requires_header_and_secret(self):
        header = build_hmac_signature_header("s3cret", self.body)
        assert verify_hmac_signature(self.body, None, "s3cret") is False
        assert verify_hmac_signature(self.body, header, None) is False

    def test_optional_policy(self):
        header = build_hmac_signature_header("s3cret", self.body)
        # sin secreto configurado se acepta, con o sin header
        assert verify_optional_hmac_signature(self.body, None, None) is True
        assert verify_optional_hmac_signature(self.body, "sha256=basura", "") is True
        # con secreto, el header es obligatorio y debe validar
        assert verify_optional_hmac_signature(self.body, None, "s3cret") is False
        assert verify_optional_hmac_signature(self.body, "sha256=basura", "s3cret") is False
        assert verify_optional_hmac_signature(self.body, header, "s3cret") is True


class TestConstantTimeEquals:
    def test_basic_semantics(self):
        assert constant_time_equals("abc", "abc") is True
        assert constant_time_equals("abc", "abd") is False
        assert constant_time_equals("abc", "abcd") is False
        assert constant_time_equals(None, "abc") is False
        assert constant_time_equals(b"abc", "abc") is True

    def test_timing_does_not_depend_on_mismatch_position(self):
        expected = "a" * 4096
        early = "b" + "a" * 4095
        late = "a" * 4095 + "b"

        def _median(candidate: str) -> float:
            samples = []
            for _ in range(7):
                start = time.perf_counter()
                for _ in range(2000):
                    constant_time_equals(candidate, expected)
                samples.append(time.perf_counter() - start)
            return statistics.median(samples)

        t_early = _median(early)
        t_late = _median(late)
        # tolerancia amplia: solo detecta comparaciones con cortocircuito evidente
        assert t_late < t_early * 5
        assert t_early < t_late * 5
