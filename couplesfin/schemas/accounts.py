"""
Account Schemas.

Cash accounts as read from the data store, and the multi-currency balance
summary computed from them.
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from couplesfin.utils import money_math
from couplesfin.utils.validation_utils import normalize_currency_code


class CashAccount(BaseModel):
    """
    Active cash account.

    The balance column may come back as null, a number or a string; it is
    read permissively (unreadable -> 0), like a form field.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(..., description="Account identifier")
    balance: Decimal = Field(Decimal("0.00"), description="Current balance")
    currency: str = Field(..., description="Account currency (ISO 4217)")

    @field_validator('balance', mode='before')
    @classmethod
    def parse_balance(cls, v):
        return money_math.round_amount(money_math.parse(v))

    @field_validator('currency', mode='before')
    @classmethod
    def uppercase_currency(cls, v):
        return normalize_currency_code(v)


class CashBalanceSummary(BaseModel):
    """Cash position of a user across currencies."""
    model_config = ConfigDict()

    total: Decimal = Field(..., description="Total of the convertible balances in `currency`")
    currency: str = Field(..., description="Currency of the total")
    by_currency: Dict[str, Decimal] = Field(default_factory=dict, description="Balance held in each currency")
    unconverted_currencies: List[str] = Field(
        default_factory=list,
        description="Currencies left out of the total because no rate path exists"
        )

    @property
    def is_complete(self) -> bool:
        """True when every balance made it into the total."""
        return not self.unconverted_currencies
