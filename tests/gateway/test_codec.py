"""
Request codec tests: camelCase wire names and JSON body encoding.
"""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from swish_client.gateway.codec import JSON_CONTENT_TYPE, encode_request, serialize
from swish_client.schemas.payment import ECommercePaymentRequest, MCommercePaymentRequest


class TestSerialize:
    """Field naming of every outbound request model."""

    def test_ecommerce_payment_fields(self, ecommerce_payment):
        assert serialize(ecommerce_payment) == {
            "amount": "100",
            "currency": "SEK",
            "callbackUrl": "https://example.com/api/swishcb/paymentrequests",
            "payeeAlias": "1231181189",
            "payeePaymentReference": "0123456789",
            "payerAlias": "4671234768",
            "message": "Kingston USB Flash Drive 8 GB",
        }

    def test_mcommerce_payment_has_no_payer_alias(self, mcommerce_payment):
        data = serialize(mcommerce_payment)
        assert "payerAlias" not in data
        assert set(data) == {
            "amount", "currency", "callbackUrl", "payeeAlias", "payeePaymentReference", "message",
        }

    def test_refund_fields(self, refund_request):
        assert serialize(refund_request) == {
            "payerPaymentReference": "0123456789",
            "originalPaymentReference": "6D6CD7406ECE4542A80152D909EF9F6B",
            "callbackUrl": "https://example.com/api/swishcb/refunds",
            "payerAlias": "1231181189",
            "payeeAlias": "4671234768",
            "amount": "100",
            "currency": "SEK",
            "message": "Refund for Kingston USB Flash Drive 8 GB",
        }

    def test_unset_optionals_are_omitted(self):
        payment = MCommercePaymentRequest(
            amount=Decimal("1.50"),
            callback_url="https://example.com/cb",
            payee_alias="1231181189",
        )
        assert serialize(payment) == {
            "amount": "1.50",
            "currency": "SEK",
            "callbackUrl": "https://example.com/cb",
            "payeeAlias": "1231181189",
        }

    def test_every_field_name_starts_lowercase(self, ecommerce_payment, mcommerce_payment, refund_request):
        for model in (ecommerce_payment, mcommerce_payment, refund_request):
            for name in serialize(model):
                assert name[0].islower(), name
                assert "_" not in name, name


class TestEncodeRequest:
    """Body bytes and headers."""

    def test_body_is_utf8_json(self):
        payment = ECommercePaymentRequest(
            amount=Decimal("100"),
            callback_url="https://example.com/cb",
            payee_alias="1231181189",
            payer_alias="4671234768",
            message="Köp på nätet",
        )
        encoded = encode_request(payment)

        assert isinstance(encoded.body, bytes)
        assert "Köp på nätet".encode("utf-8") in encoded.body
        assert json.loads(encoded.body.decode("utf-8")) == serialize(payment)

    def test_content_type_is_json(self, ecommerce_payment):
        assert encode_request(ecommerce_payment).headers == {"Content-Type": JSON_CONTENT_TYPE}
        assert JSON_CONTENT_TYPE == "application/json"

    def test_same_request_encodes_to_same_document(self, refund_request):
        first = json.loads(encode_request(refund_request).body)
        second = json.loads(encode_request(refund_request).body)
        assert first == second


class TestRequestModels:
    """Validation and immutability of request models."""

    def test_requests_are_immutable(self, ecommerce_payment):
        with pytest.raises(ValidationError):
            ecommerce_payment.amount = Decimal("5")

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            MCommercePaymentRequest(
                amount=Decimal("0"),
                callback_url="https://example.com/cb",
                payee_alias="1231181189",
            )

    def test_models_accept_wire_names(self):
        payment = ECommercePaymentRequest.model_validate({
            "amount": "10",
            "callbackUrl": "https://example.com/cb",
            "payeeAlias": "1231181189",
            "payerAlias": "4671234768",
        })
        assert payment.callback_url == "https://example.com/cb"
        assert payment.payer_alias == "4671234768"
