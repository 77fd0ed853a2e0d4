"""
Payment method details sent with a payment request.

All variants share the PaymentMethodDetails shape and are told apart by the
"type" discriminator.
"""

from typing import Annotated, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from checkout.enums import FundingSource, PayPalSubtype
from wire import JsonKey, discriminated_union


class PaymentMethodDetails(BaseModel):
    """PaymentMethodDetails"""

    __discriminator__: ClassVar[str] = "type"

    model_config = ConfigDict(populate_by_name=True)

    type: str
    checkout_attempt_id: Annotated[Optional[str], JsonKey("checkoutAttemptId")] = Field(
        default=None, alias="checkoutAttemptId"
    )


class GooglePayDetails(PaymentMethodDetails):
    """GooglePayDetails"""

    type: Literal["googlepay"] = "googlepay"
    funding_source: Annotated[Optional[FundingSource], JsonKey("fundingSource")] = Field(
        default=None, alias="fundingSource"
    )
    google_pay_card_network: Annotated[Optional[str], JsonKey("googlePayCardNetwork")] = Field(
        default=None, alias="googlePayCardNetwork"
    )
    google_pay_token: Annotated[Optional[str], JsonKey("googlePayToken")] = Field(
        default=None, alias="googlePayToken"
    )


class ApplePayDetails(PaymentMethodDetails):
    """ApplePayDetails"""

    type: Literal["applepay"] = "applepay"
    apple_pay_token: Annotated[Optional[str], JsonKey("applePayToken")] = Field(
        default=None, alias="applePayToken"
    )
    funding_source: Annotated[Optional[FundingSource], JsonKey("fundingSource")] = Field(
        default=None, alias="fundingSource"
    )


class PayPalDetails(PaymentMethodDetails):
    """PayPalDetails"""

    type: Literal["paypal"] = "paypal"
    order_id: Annotated[Optional[str], JsonKey("orderID")] = Field(default=None, alias="orderID")
    payer_id: Annotated[Optional[str], JsonKey("payerID")] = Field(default=None, alias="payerID")
    subtype: Optional[PayPalSubtype] = None


class CardDetails(PaymentMethodDetails):
    """CardDetails"""

    type: Literal["scheme"] = "scheme"
    brand: Optional[str] = None
    encrypted_card_number: Annotated[Optional[str], JsonKey("encryptedCardNumber")] = Field(
        default=None, alias="encryptedCardNumber"
    )
    encrypted_expiry_month: Annotated[Optional[str], JsonKey("encryptedExpiryMonth")] = Field(
        default=None, alias="encryptedExpiryMonth"
    )
    encrypted_expiry_year: Annotated[Optional[str], JsonKey("encryptedExpiryYear")] = Field(
        default=None, alias="encryptedExpiryYear"
    )
    encrypted_security_code: Annotated[Optional[str], JsonKey("encryptedSecurityCode")] = Field(
        default=None, alias="encryptedSecurityCode"
    )
    holder_name: Annotated[Optional[str], JsonKey("holderName")] = Field(
        default=None, alias="holderName"
    )
    funding_source: Annotated[Optional[FundingSource], JsonKey("fundingSource")] = Field(
        default=None, alias="fundingSource"
    )


PaymentMethod, PAYMENT_METHOD_FAMILY = discriminated_union(
    GooglePayDetails,
    ApplePayDetails,
    PayPalDetails,
    CardDetails,
)
