"""
Shared schemas.

- Currency: an amount bound to its ISO 4217 code, cent-exact arithmetic
- BaseBulkResponse: envelope for endpoints that process a list of items
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from decimal import Decimal
from typing import Any, Generic, Iterable, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from couplesfin.utils import money_math
from couplesfin.utils.validation_utils import normalize_currency_code


# =============================================================================
# CURRENCY
# =============================================================================

class Currency(BaseModel):
    """
    Amount of money in one currency.

    Mixing currencies is refused: sums and comparisons only accept another
    Currency with the same code, and go through integer cents.

    Examples:
        >>> Currency(code="brl", amount="1.234,56")
        Currency(code='BRL', amount=Decimal('1234.56'))
        >>> Currency(code="BRL", amount=0.1) + Currency(code="BRL", amount=0.2)
        Currency(code='BRL', amount=Decimal('0.30'))
        >>> Currency(code="BRL", amount=100).split(3)  # rent shared by three
        [Currency(code='BRL', amount=Decimal('33.34')), ...]
        >>> Currency(code="BRL", amount=1) + Currency(code="USD", amount=1)  # ValueError
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(..., description="ISO 4217 currency code")
    amount: Decimal = Field(..., description="Amount, negative for debts")

    @field_validator('code', mode='before')
    @classmethod
    def validate_currency_code(cls, v: Any) -> str:
        return normalize_currency_code(v)

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v: Any) -> Decimal:
        """Strict: a typo is an error here, never a zero."""
        try:
            return money_math.parse(v, strict=True)
        except money_math.InvalidAmountError as e:
            raise ValueError(str(e)) from None

    def _same_code_amount(self, other: Any, verb: str) -> Decimal:
        if not isinstance(other, Currency):
            raise TypeError(f"Cannot {verb} Currency and {type(other).__name__}")
        if other.code != self.code:
            raise ValueError(f"Cannot {verb} {self.code} and {other.code}")
        return other.amount

    def _with(self, amount: Decimal) -> Currency:
        return Currency(code=self.code, amount=amount)

    # Arithmetic

    def __add__(self, other: Currency) -> Currency:
        return self._with(money_math.add(self.amount, self._same_code_amount(other, "add")))

    def __sub__(self, other: Currency) -> Currency:
        return self._with(money_math.subtract(self.amount, self._same_code_amount(other, "subtract")))

    def __neg__(self) -> Currency:
        return self._with(-self.amount)

    def __abs__(self) -> Currency:
        return self._with(abs(self.amount))

    def split(self, parts: int) -> List[Currency]:
        """Equal shares that add back up to this amount (see money_math.allocate)."""
        return [self._with(share) for share in money_math.allocate(self.amount, parts)]

    @classmethod
    def total(cls, code: str, items: Iterable[Currency]) -> Currency:
        """Sum of same-currency amounts; an empty iterable gives zero."""
        result = cls.zero(code)
        for item in items:
            result = result + item
        return result

    # Comparison

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Currency):
            return False
        return (self.code, self.amount) == (other.code, other.amount)

    def __hash__(self) -> int:
        return hash((self.code, self.amount))

    def __lt__(self, other: Currency) -> bool:
        return self.amount < self._same_code_amount(other, "compare")

    def __le__(self, other: Currency) -> bool:
        return self.amount <= self._same_code_amount(other, "compare")

    def __gt__(self, other: Currency) -> bool:
        return self.amount > self._same_code_amount(other, "compare")

    def __ge__(self, other: Currency) -> bool:
        return self.amount >= self._same_code_amount(other, "compare")

    # Display / helpers

    def __str__(self) -> str:
        """'100.50 BRL'"""
        return f"{self.amount} {self.code}"

    def __repr__(self) -> str:
        return f"Currency(code='{self.code}', amount=Decimal('{self.amount}'))"

    def to_dict(self) -> dict:
        """JSON-safe dict, amount as string."""
        return {"currency": self.code, "amount": str(self.amount)}

    def rounded(self) -> Currency:
        return self._with(money_math.round_amount(self.amount))

    @classmethod
    def zero(cls, code: str) -> Currency:
        return cls(code=code, amount=money_math.ZERO)

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0


# =============================================================================
# BULK RESPONSES
# =============================================================================

TResult = TypeVar('TResult', bound=BaseModel)


class BaseBulkResponse(BaseModel, Generic[TResult]):
    """
    Envelope for list-processing endpoints.

    One entry in `results` per input item, in input order. Items that failed
    still get an entry, and their messages are collected in `errors`.
    """
    model_config = ConfigDict(extra="forbid")

    results: List[TResult] = Field(..., description="One result per input item, in order")
    success_count: int = Field(..., ge=0, description="Items processed without error")
    errors: List[str] = Field(default_factory=list, description="Messages for the failed items")

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def failed_count(self) -> int:
        return self.total_count - self.success_count
