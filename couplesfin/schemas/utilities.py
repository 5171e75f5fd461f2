"""
Schemas for the utilities endpoints (money parsing/formatting, currency list).
"""
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from couplesfin.utils.currency_utils import CurrencyInfo
from couplesfin.utils.validation_utils import normalize_currency_code


class MoneyParseRequest(BaseModel):
    """Raw value typed in an amount field."""
    model_config = ConfigDict(extra="forbid")

    value: Optional[Union[str, float, int]] = Field(None, description="Free text or number")


class MoneyParseResponse(BaseModel):
    """Parsed amount (0 when the value could not be read)."""
    query: Optional[Union[str, float, int]] = Field(None, description="Original value")
    amount: Decimal = Field(..., description="Parsed amount, not rounded")
    rounded: Decimal = Field(..., description="Parsed amount rounded to the cent")


class MoneyFormatRequest(BaseModel):
    """Amount to format for display."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    amount: Decimal = Field(..., description="Amount")
    currency: str = Field(..., description="ISO 4217 currency code")
    locale: Optional[str] = Field(None, description="Babel locale (default: server DEFAULT_LOCALE)")
    compact: bool = Field(False, description="Use short notation (R$ 1,2 mil)")

    @field_validator('currency', mode='before')
    @classmethod
    def uppercase_currency(cls, v):
        return normalize_currency_code(v)


class MoneyFormatResponse(BaseModel):
    formatted: str = Field(..., description="Amount formatted for display")
    amount: Decimal = Field(..., description="Amount rounded to the cent")
    currency: str = Field(..., description="ISO 4217 currency code")


class CurrencyListResponse(BaseModel):
    """Supported currencies with localized names and symbols."""
    currencies: List[CurrencyInfo] = Field(..., description="Currencies")
    count: int = Field(..., ge=0, description="Number of currencies")
    language: str = Field(..., description="Language used for names")
