"""
Foreign Exchange (FX) Schemas.

This module contains Pydantic models for exchange rates and the rate table
the conversion functions receive from their caller.

**Domain Coverage**:
- FXRate: one directional rate with its last-updated timestamp
- RateTable: the set of rates available for a conversion, with path lookup
- Conversion: bulk conversion requests and results
- Aggregation: multi-currency totals

**Design Notes**:
- Rates are fetched and refreshed elsewhere (scheduled job); this package
  only reads them, it never fetches.
- A rate is directional: 1 base = rate * quote.
- Decimal fields serialize as strings in JSON for precision.
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from couplesfin.schemas.common import BaseBulkResponse
from couplesfin.utils import money_math
from couplesfin.utils.datetime_utils import parse_ISO_datetime, utcnow
from couplesfin.utils.validation_utils import normalize_currency_code


def _coerce_decimal(v: Any) -> Decimal:
    try:
        return money_math.parse(v, strict=True)
    except money_math.InvalidAmountError as e:
        raise ValueError(str(e)) from None


# ============================================================================
# RATE MODELS
# ============================================================================

class FXRate(BaseModel):
    """
    Directional exchange rate: 1 base = rate * quote.

    Examples:
        >>> FXRate(base="BRL", quote="USD", rate="0.19")  # 1 BRL = 0.19 USD
        >>> FXRate(base="BRL", quote="USD", rate="0.19").inverse().rate
        Decimal('5.263157894736842105263157895')
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    base: str = Field(..., min_length=3, max_length=3, description="Source currency (ISO 4217)")
    quote: str = Field(..., min_length=3, max_length=3, description="Target currency (ISO 4217)")
    rate: Decimal = Field(..., gt=0, description="Exchange rate (must be positive)")
    updated_at: datetime = Field(default_factory=utcnow, description="When the rate was last refreshed")

    @field_validator('base', 'quote', mode='before')
    @classmethod
    def uppercase_currency(cls, v):
        return normalize_currency_code(v)

    @field_validator('rate', mode='before')
    @classmethod
    def coerce_rate(cls, v):
        """Coerce rate to Decimal."""
        return _coerce_decimal(v)

    @field_validator('updated_at', mode='before')
    @classmethod
    def _parse_updated_at(cls, v):
        return parse_ISO_datetime(v)

    @model_validator(mode='after')
    def validate_distinct_currencies(self) -> FXRate:
        if self.base == self.quote:
            raise ValueError(f"base and quote must differ, got {self.base}/{self.quote}")
        return self

    def inverse(self) -> FXRate:
        """Same rate read in the opposite direction."""
        return FXRate(base=self.quote, quote=self.base, rate=Decimal(1) / self.rate, updated_at=self.updated_at)


class RateTable(BaseModel):
    """
    Exchange rates available to a conversion.

    Lookup order for from -> to:
    1. identity (from == to): 1
    2. direct entry from/to
    3. inverse entry to/from: 1 / rate
    4. through base_currency: (from -> base) * (base -> to), each leg direct or inverse

    When the same pair appears more than once, the most recently updated entry wins.
    The table is immutable: the lookup index is built once, at validation.

    Examples:
        >>> table = RateTable.from_quotes("BRL", {"USD": "0.19", "EUR": "0.17"})
        >>> table.get_rate("USD", "BRL")    # inverse
        >>> table.get_rate("USD", "EUR")    # USD -> BRL -> EUR
        >>> table.get_rate("USD", "GBP")    # None: no path
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_currency: str = Field("BRL", description="Pivot currency for indirect paths")
    rates: Tuple[FXRate, ...] = Field(default_factory=tuple, description="Available rates")

    _index: Dict[Tuple[str, str], FXRate] = PrivateAttr(default_factory=dict)

    @field_validator('base_currency', mode='before')
    @classmethod
    def uppercase_base(cls, v):
        return normalize_currency_code(v)

    def model_post_init(self, __context: Any) -> None:
        index: Dict[Tuple[str, str], FXRate] = {}
        for fx_rate in self.rates:
            key = (fx_rate.base, fx_rate.quote)
            current = index.get(key)
            if current is None or fx_rate.updated_at >= current.updated_at:
                index[key] = fx_rate
        self._index = index

    @classmethod
    def from_quotes(
        cls,
        base: str,
        quotes: Mapping[str, Any],
        updated_at: Optional[datetime] = None
        ) -> RateTable:
        """
        Build a table from quotes against one base currency.

        This is the shape produced by the rate refresh job: {"USD": 0.19}
        means 1 BRL = 0.19 USD. A quote for the base itself is ignored.

        Raises:
            ValueError: If a quote is not positive or a code is invalid
        """
        base_code = normalize_currency_code(base)
        timestamp = updated_at or utcnow()
        rates = [
            FXRate(base=base_code, quote=code, rate=value, updated_at=timestamp)
            for code, value in quotes.items()
            if normalize_currency_code(code) != base_code
            ]
        return cls(base_currency=base_code, rates=rates)

    def _leg(self, from_code: str, to_code: str) -> Optional[Decimal]:
        if from_code == to_code:
            return Decimal(1)
        direct = self._index.get((from_code, to_code))
        if direct is not None:
            return direct.rate
        inverse = self._index.get((to_code, from_code))
        if inverse is not None:
            return Decimal(1) / inverse.rate
        return None

    def get_rate(self, from_currency: str, to_currency: str) -> Optional[Decimal]:
        """
        Find the rate converting from_currency into to_currency.

        Returns:
            Rate as Decimal, or None when no path exists

        Raises:
            ValueError: If a currency code is invalid
        """
        from_code = normalize_currency_code(from_currency)
        to_code = normalize_currency_code(to_currency)

        rate = self._leg(from_code, to_code)
        if rate is not None:
            return rate

        pivot = self.base_currency
        if pivot in (from_code, to_code):
            return None

        first_leg = self._leg(from_code, pivot)
        if first_leg is None:
            return None
        second_leg = self._leg(pivot, to_code)
        if second_leg is None:
            return None
        return first_leg * second_leg

    def has_path(self, from_currency: str, to_currency: str) -> bool:
        return self.get_rate(from_currency, to_currency) is not None

    def currencies(self) -> List[str]:
        """Sorted codes appearing in the table."""
        codes = set()
        for base, quote in self._index:
            codes.update((base, quote))
        return sorted(codes)

    @property
    def last_updated(self) -> Optional[datetime]:
        """Timestamp of the oldest rate in the table (None if empty)."""
        if not self._index:
            return None
        return min(fx_rate.updated_at for fx_rate in self._index.values())

    def is_stale(self, max_age: timedelta, now: Optional[datetime] = None) -> bool:
        """True when the table is empty or its oldest rate is older than max_age."""
        last_updated = self.last_updated
        if last_updated is None:
            return True
        return (now or utcnow()) - last_updated > max_age


# ============================================================================
# CONVERSION MODELS
# ============================================================================

class FXConversionItem(BaseModel):
    """Single conversion to perform."""
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        )

    amount: Decimal = Field(..., description="Amount to convert")
    from_currency: str = Field(..., alias="from", description="Source currency (ISO 4217)")
    to_currency: str = Field(..., alias="to", description="Target currency (ISO 4217)")

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v):
        return _coerce_decimal(v)

    @field_validator('from_currency', 'to_currency', mode='before')
    @classmethod
    def uppercase_currency(cls, v):
        return normalize_currency_code(v)


class FXConversionResult(BaseModel):
    """Single conversion result (converted_amount is None when no rate path exists)."""
    model_config = ConfigDict()

    amount: Decimal = Field(..., description="Original amount")
    from_currency: str = Field(..., description="Source currency code")
    to_currency: str = Field(..., description="Target currency code")
    converted_amount: Optional[Decimal] = Field(None, description="Converted amount, rounded to the cent")
    rate: Optional[Decimal] = Field(None, description="Exchange rate used (None for identity or failure)")
    error: Optional[str] = Field(None, description="Why the conversion failed")


class FXConvertRequest(BaseModel):
    """Bulk conversion request with the rate table to use."""
    model_config = ConfigDict(extra="forbid")

    conversions: List[FXConversionItem] = Field(..., min_length=1, description="Conversions to perform")
    rate_table: RateTable = Field(..., description="Rates available for the conversions")


class FXConvertResponse(BaseBulkResponse[FXConversionResult]):
    """Response model for bulk currency conversion."""
    # Inherits: results, success_count, errors
    rates_last_updated: Optional[datetime] = Field(None, description="Oldest rate timestamp in the table")
    stale: bool = Field(False, description="Whether the rate table is older than the configured maximum age")


# ============================================================================
# AGGREGATION MODELS
# ============================================================================

class FXAggregateItem(BaseModel):
    """An amount in its own currency."""
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(..., description="Amount")
    currency: str = Field(..., description="Currency of the amount (ISO 4217)")

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v):
        return _coerce_decimal(v)

    @field_validator('currency', mode='before')
    @classmethod
    def uppercase_currency(cls, v):
        return normalize_currency_code(v)


class FXAggregateRequest(BaseModel):
    """Amounts in mixed currencies to total in one target currency."""
    model_config = ConfigDict(extra="forbid")

    items: List[FXAggregateItem] = Field(default_factory=list, description="Amounts to total")
    target_currency: str = Field(..., description="Currency of the total (ISO 4217)")
    rate_table: RateTable = Field(..., description="Rates available for the conversions")

    @field_validator('target_currency', mode='before')
    @classmethod
    def uppercase_currency(cls, v):
        return normalize_currency_code(v)


class FXAggregateResponse(BaseModel):
    """Total of the aggregated amounts."""
    model_config = ConfigDict()

    total: Decimal = Field(..., description="Total in the target currency")
    currency: str = Field(..., description="Target currency")
    item_count: int = Field(..., ge=0, description="Number of amounts aggregated")
