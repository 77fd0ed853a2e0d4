"""
test_wire.py - Wire annotation and polymorphic family tests

Checks for:
- JsonKey validation and lookup
- discriminated_union (family construction and definition-time errors)
- dump_orjson parity with pydantic's by-alias JSON

Usage: python test_wire.py
"""

from __future__ import annotations

import json
import os
import sys
from typing import ClassVar, Literal

# Ensure local imports resolve from project root.
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import orjson
import pytest
from pydantic import BaseModel, TypeAdapter

from checkout import (
    PAYMENT_METHOD_FAMILY,
    Amount,
    CardDetails,
    FundingSource,
    GooglePayDetails,
    PaymentRequest,
    PaymentResponse,
    PayPalDetails,
    PayPalSubtype,
    ShopperInteraction,
)
from wire import JsonKey, discriminated_union, discriminator_of, dump_orjson, json_key_of


class Voucher(BaseModel):
    __discriminator__: ClassVar[str] = "kind"
    kind: str


class GiftVoucher(Voucher):
    kind: Literal["gift"] = "gift"


class MealVoucher(Voucher):
    kind: Literal["meal"] = "meal"


class OtherMealVoucher(Voucher):
    kind: Literal["meal"] = "meal"


class Ticket(BaseModel):
    __discriminator__: ClassVar[str] = "category"
    category: Literal["event"] = "event"


class UntaggedVoucher(Voucher):
    kind: str = "untagged"


def test_json_key_requires_name():
    with pytest.raises(ValueError):
        JsonKey("")


def test_json_key_lookup():
    assert json_key_of(GooglePayDetails, "google_pay_token") == "googlePayToken"
    assert json_key_of(GooglePayDetails, "type") is None
    assert json_key_of(GooglePayDetails, "no_such_field") is None


def test_discriminator_of():
    assert discriminator_of(GiftVoucher) == ("kind", "gift")
    assert discriminator_of(Voucher) == ("kind", None)
    assert discriminator_of(Amount) == (None, None)


def test_discriminated_union_builds_family_and_annotation():
    annotation, family = discriminated_union(GiftVoucher, MealVoucher)
    assert family.base == f"{__name__}.Voucher"
    assert family.discriminator_field == "kind"
    assert family.variants == {
        "gift": f"{__name__}.GiftVoucher",
        "meal": f"{__name__}.MealVoucher",
    }
    parsed = TypeAdapter(annotation).validate_python({"kind": "meal"})
    assert isinstance(parsed, MealVoucher)


def test_discriminated_union_rejects_duplicate_values():
    with pytest.raises(ValueError, match="'meal'"):
        discriminated_union(GiftVoucher, MealVoucher, OtherMealVoucher)


def test_discriminated_union_rejects_mixed_fields():
    with pytest.raises(ValueError, match="share one discriminator field"):
        discriminated_union(GiftVoucher, Ticket)


def test_discriminated_union_needs_literal_values():
    with pytest.raises(ValueError, match="single Literal value"):
        discriminated_union(GiftVoucher, UntaggedVoucher)


def test_discriminated_union_needs_two_variants():
    with pytest.raises(ValueError):
        discriminated_union(GiftVoucher)


def test_checkout_family_covers_all_variants():
    assert PAYMENT_METHOD_FAMILY.base == "checkout.payment_method_details.PaymentMethodDetails"
    assert PAYMENT_METHOD_FAMILY.variant_for("paypal") == "checkout.payment_method_details.PayPalDetails"
    assert PAYMENT_METHOD_FAMILY.variant_for("ideal") is None


def test_payment_request_parses_variant_by_discriminator():
    request = PaymentRequest.model_validate(
        {
            "amount": {"currency": "EUR", "value": 1000},
            "merchantAccount": "TestMerchant",
            "paymentMethod": {"type": "paypal", "orderID": "5O190127TN364715T", "subtype": "sdk"},
            "reference": "order-42",
        }
    )
    assert isinstance(request.payment_method, PayPalDetails)
    assert request.payment_method.order_id == "5O190127TN364715T"
    assert request.payment_method.subtype is PayPalSubtype.SDK


def test_dump_orjson_matches_pydantic_for_request():
    request = PaymentRequest(
        amount=Amount(currency="EUR", value=1000),
        merchant_account="TestMerchant",
        payment_method=GooglePayDetails(funding_source=FundingSource.DEBIT, google_pay_token="token-1"),
        reference="order-1",
        shopper_interaction=ShopperInteraction.ECOMMERCE,
    )
    expected = json.loads(request.model_dump_json(by_alias=True, exclude_none=True))
    assert orjson.loads(dump_orjson(request)) == expected
    assert expected["paymentMethod"]["fundingSource"] == "debit"


def test_dump_orjson_matches_pydantic_for_response():
    response = PaymentResponse(
        result_code=PaymentResponse.ResultCode.REDIRECTSHOPPER,
        psp_reference="8815658961765250",
        additional_data={"cardSummary": "1111"},
        amount=Amount(currency="USD", value=250),
    )
    expected = json.loads(response.model_dump_json(by_alias=True, exclude_none=True))
    assert orjson.loads(dump_orjson(response)) == expected


def test_dump_orjson_card_details():
    details = CardDetails(encrypted_card_number="enc-number", holder_name="S. Hopper")
    payload = orjson.loads(dump_orjson(details))
    assert payload == {"type": "scheme", "encryptedCardNumber": "enc-number", "holderName": "S. Hopper"}


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))
