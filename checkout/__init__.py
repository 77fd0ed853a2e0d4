"""
checkout - Generated request/response models for the Checkout API.

Every renamed field declares its wire name for both JSON codecs:
pydantic through Field(alias=...) and orjson through JsonKey(...).
"""

from checkout.amount import Amount
from checkout.enums import FundingSource, PayPalSubtype, ShopperInteraction
from checkout.payment_method_details import (
    PAYMENT_METHOD_FAMILY,
    ApplePayDetails,
    CardDetails,
    GooglePayDetails,
    PaymentMethod,
    PaymentMethodDetails,
    PayPalDetails,
)
from checkout.payment_request import PaymentRequest
from checkout.payment_response import PaymentResponse

__all__ = [
    "Amount",
    "ApplePayDetails",
    "CardDetails",
    "FundingSource",
    "GooglePayDetails",
    "PAYMENT_METHOD_FAMILY",
    "PayPalDetails",
    "PayPalSubtype",
    "PaymentMethod",
    "PaymentMethodDetails",
    "PaymentRequest",
    "PaymentResponse",
    "ShopperInteraction",
]
