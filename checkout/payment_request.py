"""PaymentRequest"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from checkout.amount import Amount
from checkout.enums import ShopperInteraction
from checkout.payment_method_details import PaymentMethod
from wire import JsonKey


class PaymentRequest(BaseModel):
    """PaymentRequest"""

    model_config = ConfigDict(populate_by_name=True)

    amount: Amount
    merchant_account: Annotated[str, JsonKey("merchantAccount")] = Field(..., alias="merchantAccount")
    payment_method: Annotated[PaymentMethod, JsonKey("paymentMethod")] = Field(..., alias="paymentMethod")
    reference: str
    return_url: Annotated[Optional[str], JsonKey("returnUrl")] = Field(default=None, alias="returnUrl")
    shopper_reference: Annotated[Optional[str], JsonKey("shopperReference")] = Field(
        default=None, alias="shopperReference"
    )
    shopper_interaction: Annotated[Optional[ShopperInteraction], JsonKey("shopperInteraction")] = Field(
        default=None, alias="shopperInteraction"
    )
    country_code: Annotated[Optional[str], JsonKey("countryCode")] = Field(default=None, alias="countryCode")
