"""PaymentResponse"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from checkout.amount import Amount
from wire import JsonKey


class PaymentResponse(BaseModel):
    """PaymentResponse"""

    class ResultCode(str, Enum):
        """Gets or Sets resultCode"""

        AUTHORISED = "Authorised"
        CANCELLED = "Cancelled"
        ERROR = "Error"
        PENDING = "Pending"
        RECEIVED = "Received"
        REDIRECTSHOPPER = "RedirectShopper"
        REFUSED = "Refused"

    model_config = ConfigDict(populate_by_name=True)

    additional_data: Annotated[Optional[dict[str, str]], JsonKey("additionalData")] = Field(
        default=None, alias="additionalData"
    )
    amount: Optional[Amount] = None
    merchant_reference: Annotated[Optional[str], JsonKey("merchantReference")] = Field(
        default=None, alias="merchantReference"
    )
    psp_reference: Annotated[Optional[str], JsonKey("pspReference")] = Field(
        default=None, alias="pspReference"
    )
    refusal_reason: Annotated[Optional[str], JsonKey("refusalReason")] = Field(
        default=None, alias="refusalReason"
    )
    result_code: Annotated[Optional[ResultCode], JsonKey("resultCode")] = Field(
        default=None, alias="resultCode"
    )
