"""Amount"""

from pydantic import BaseModel, ConfigDict, Field


class Amount(BaseModel):
    """Amount in minor units of the given currency."""

    model_config = ConfigDict(populate_by_name=True)

    currency: str = Field(..., min_length=3, max_length=3)
    value: int
