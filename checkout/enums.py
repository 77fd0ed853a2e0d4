"""Enums shared by several Checkout models."""

from enum import Enum


class FundingSource(str, Enum):
    """Gets or Sets fundingSource"""

    CREDIT = "credit"
    DEBIT = "debit"


class ShopperInteraction(str, Enum):
    """Gets or Sets shopperInteraction"""

    ECOMMERCE = "Ecommerce"
    CONTAUTH = "ContAuth"
    MOTO = "Moto"
    POS = "POS"


class PayPalSubtype(str, Enum):
    """Gets or Sets subtype"""

    REDIRECT = "redirect"
    SDK = "sdk"
