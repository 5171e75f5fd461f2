"""
Currency conversion and multi-currency aggregation.

Every function works on a RateTable handed in by the caller: rates are
fetched and refreshed by a scheduled job elsewhere, never here.

Conversion rules:
- same currency: the amount is returned unchanged, no rounding pass
- otherwise: round_amount(multiply(amount, rate)), one rounding at the cent
- no rate path: RateNotFoundError (or None from the non-raising variants),
  so a missing rate can never be mistaken for a zero balance

Aggregation converts each item on its own and sums integer cents, so the
total does not depend on the order of the items.
"""
from datetime import timedelta
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

import structlog

from couplesfin.config import get_settings
from couplesfin.schemas.fx import RateTable
from couplesfin.utils import money_math
from couplesfin.utils.money_math import AmountInput
from couplesfin.utils.validation_utils import normalize_currency_code

logger = structlog.get_logger(__name__)


# ============================================================================
# EXCEPTIONS
# ============================================================================

class FXServiceError(Exception):
    """Base exception for FX service errors."""
    pass


class RateNotFoundError(FXServiceError):
    """Raised when no rate path exists between two currencies."""

    def __init__(self, from_currency: str, to_currency: str):
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(f"No FX rate path from {from_currency} to {to_currency}")


# ============================================================================
# CURRENCY CONVERSION FUNCTIONS
# ============================================================================

def convert(
    amount: AmountInput,
    from_currency: str,
    to_currency: str,
    rate_table: RateTable
    ) -> Decimal:
    """
    Convert an amount from one currency to another.

    Args:
        amount: Amount to convert
        from_currency: Source currency code (ISO 4217)
        to_currency: Target currency code (ISO 4217)
        rate_table: Rates to use

    Returns:
        The amount itself when both currencies match, otherwise the converted
        amount rounded to the cent

    Raises:
        RateNotFoundError: If the table has no direct, inverse or pivot path
        ValueError: If a currency code is invalid
        InvalidAmountError: If the amount is not a finite number

    Examples:
        >>> table = RateTable.from_quotes("BRL", {"USD": "0.19"})
        >>> convert(Decimal("100"), "BRL", "USD", table)
        Decimal('19.00')
        >>> convert(Decimal("12.345"), "USD", "USD", table)
        Decimal('12.345')
    """
    from_code = normalize_currency_code(from_currency)
    to_code = normalize_currency_code(to_currency)

    if from_code == to_code:
        return money_math.as_decimal(amount)

    rate = rate_table.get_rate(from_code, to_code)
    if rate is None:
        logger.info("No FX rate path", from_currency=from_code, to_currency=to_code)
        raise RateNotFoundError(from_code, to_code)

    return money_math.round_amount(money_math.multiply(amount, rate))


def try_convert(
    amount: AmountInput,
    from_currency: str,
    to_currency: str,
    rate_table: RateTable
    ) -> Optional[Decimal]:
    """Like convert(), but returns None when no rate path exists."""
    try:
        return convert(amount, from_currency, to_currency, rate_table)
    except RateNotFoundError:
        return None


def max_rate_age() -> timedelta:
    """Age past which a rate table counts as stale (FX_RATE_MAX_AGE_HOURS)."""
    return timedelta(hours=get_settings().FX_RATE_MAX_AGE_HOURS)


def warn_if_stale(rate_table: RateTable) -> bool:
    """
    Log a warning when the table is older than FX_RATE_MAX_AGE_HOURS.

    Returns:
        True if the table is stale
    """
    max_age = max_rate_age()
    stale = rate_table.is_stale(max_age)
    if stale:
        logger.warning(
            "FX rate table is stale",
            last_updated=rate_table.last_updated.isoformat() if rate_table.last_updated else None,
            max_age_hours=max_age.total_seconds() / 3600,
            )
    return stale


def convert_bulk(
    conversions: Iterable[Tuple[AmountInput, str, str]],
    rate_table: RateTable,
    raise_on_error: bool = True
    ) -> Tuple[List[Optional[Decimal]], List[str]]:
    """
    Convert multiple amounts with the same rate table.

    Args:
        conversions: (amount, from_currency, to_currency) tuples
        rate_table: Rates to use
        raise_on_error: If True, raise on the first missing rate.
            If False, put None in its slot, collect the message and continue

    Returns:
        Tuple of (results, errors): one result per conversion, in order,
        and the messages for the failed ones

    Raises:
        RateNotFoundError: If a conversion has no rate path and raise_on_error=True
    """
    conversions = list(conversions)
    if not conversions:
        return [], []

    warn_if_stale(rate_table)

    results: List[Optional[Decimal]] = []
    errors: List[str] = []

    for idx, (amount, from_currency, to_currency) in enumerate(conversions):
        try:
            results.append(convert(amount, from_currency, to_currency, rate_table))
        except RateNotFoundError as e:
            if raise_on_error:
                raise
            errors.append(f"Conversion {idx}: {e}")
            results.append(None)

    logger.debug("Bulk conversion done", total=len(conversions), failed=len(errors))
    return results, errors


# ============================================================================
# AGGREGATION
# ============================================================================

def aggregate_across_currencies(
    items: Iterable[Tuple[AmountInput, str]],
    target_currency: str,
    rate_table: RateTable
    ) -> Decimal:
    """
    Total amounts held in different currencies, expressed in one currency.

    Each item is converted with convert() and the results are summed as
    integer cents: the total is the same whatever the order of items.

    Args:
        items: (amount, currency) pairs
        target_currency: Currency of the total
        rate_table: Rates to use

    Returns:
        Total in target_currency, rounded to the cent

    Raises:
        RateNotFoundError: If any item's currency cannot reach target_currency

    Examples:
        >>> table = RateTable.from_quotes("USD", {"EUR": "0.5"})
        >>> aggregate_across_currencies([(10, "USD"), (5, "EUR")], "USD", table)
        Decimal('20.00')
    """
    return money_math.sum_amounts(
        convert(amount, currency, target_currency, rate_table)
        for amount, currency in items
        )
