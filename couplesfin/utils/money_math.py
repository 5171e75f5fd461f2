"""
Monetary arithmetic on integer cents.

Every operation converts its operands to integer minor units (cents),
computes with plain ints and scales back down once, so balances reconcile
to the cent no matter how many values are added or in which order.

Amounts are returned as Decimal with exactly 2 fractional digits.
Floats are read through their shortest repr, so 0.1 is Decimal("0.1") and
not the binary approximation 0.1000000000000000055511151231257827...

Usage:
    from couplesfin.utils import money_math

    money_math.add(0.1, 0.2)                 # Decimal("0.30")
    money_math.parse("R$ 1.234,56")          # Decimal("1234.56")
    money_math.sum_amounts(["10.10", 0.2])   # Decimal("10.30")

Coercion policy:
    parse() and divide() are permissive: unparseable input and a zero
    divisor yield zero instead of raising, because they are called on
    every keystroke of a form field. Use parse(value, strict=True) when a
    typo must not silently become a zero amount.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional, Union

import structlog

logger = structlog.get_logger(__name__)

AmountInput = Union[Decimal, int, float, str]

CENTS_EXPONENT = 2  # 1 unit = 10**2 cents for BRL, USD, EUR, GBP
ZERO = Decimal("0.00")

# Everything that is not a digit, a decimal/thousands marker or a minus sign
_NON_NUMERIC = re.compile(r"[^\d,.\-]")
_FIRST_DIGIT = re.compile(r"\d")
_LAST_DIGIT = re.compile(r"\d(?!.*\d)")
# Between the first and last digit only separators may appear
_NOT_BODY = re.compile(r"[^\d,.\s]")


class InvalidAmountError(ValueError):
    """Raised when a value cannot be read as a finite monetary amount."""
    pass


# ============================================================================
# CONVERSIONS
# ============================================================================

def as_decimal(value: AmountInput) -> Decimal:
    """
    Resolve a numeric operand to a finite Decimal.

    Accepts Decimal, int, float and plain numeric strings ("12.50").
    Raises InvalidAmountError for anything else, including bool, NaN and Infinity.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Amount must be numeric, got {type(value).__name__}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidAmountError(f"Cannot convert '{value}' to an amount") from None
    else:
        raise InvalidAmountError(f"Amount must be numeric, got {type(value).__name__}")

    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value!r}")
    return result


def _round_to_int(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def to_cents(amount: AmountInput) -> int:
    """
    Convert an amount to integer cents, rounding half away from zero.

    Examples:
        >>> to_cents(Decimal("12.34"))
        1234
        >>> to_cents(1.005)
        101
        >>> to_cents("-0.125")
        -13
    """
    return _round_to_int(as_decimal(amount).scaleb(CENTS_EXPONENT))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to an amount with exactly 2 fractional digits."""
    return Decimal(int(cents)).scaleb(-CENTS_EXPONENT)


# ============================================================================
# PARSING
# ============================================================================

def _normalize_decimal_marker(text: str) -> str:
    """
    Drop thousands separators and turn the decimal marker into a dot.

    Rules:
    - both ',' and '.' present: the rightmost one is the decimal marker
    - a single ',' or '.': decimal marker
    - the same marker repeated: thousands separator

    Examples:
        "1.234,56" -> "1234.56"
        "1,234.56" -> "1234.56"
        "12,5"     -> "12.5"
        "1.234.567" -> "1234567"
    """
    last_dot = text.rfind(".")
    last_comma = text.rfind(",")

    if last_dot == -1 and last_comma == -1:
        return text

    if last_dot != -1 and last_comma != -1:
        marker = "." if last_dot > last_comma else ","
    else:
        marker = "." if last_dot != -1 else ","
        if text.count(marker) > 1:
            return text.replace(marker, "")

    thousands = "," if marker == "." else "."
    integer_part, _, fraction = text.replace(thousands, "").rpartition(marker)
    return f"{integer_part.replace(marker, '')}.{fraction}"


def _check_strict_text(text: str) -> None:
    """Reject text the lenient cleanup would turn into a different number."""
    first_digit = _FIRST_DIGIT.search(text)
    if first_digit is None:
        raise InvalidAmountError(f"No digits in '{text}'")

    body = text[first_digit.start():_LAST_DIGIT.search(text).end()]
    if _NOT_BODY.search(body):
        raise InvalidAmountError(f"Unexpected characters in amount '{text}'")
    if "-" in text[first_digit.start():] or text.count("-") > 1:
        raise InvalidAmountError(f"Minus sign must lead the amount '{text}'")


def _parse_text(text: str, strict: bool = False) -> Decimal:
    if strict:
        # Plain numeric strings ("1e-3", "-12.50") are read as written
        try:
            return as_decimal(text)
        except InvalidAmountError:
            _check_strict_text(text)

    cleaned = _NON_NUMERIC.sub("", text)
    negative = cleaned.startswith("-")
    cleaned = _normalize_decimal_marker(cleaned.replace("-", ""))

    if not any(ch.isdigit() for ch in cleaned):
        raise InvalidAmountError(f"No digits in '{text}'")

    try:
        result = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidAmountError(f"Cannot convert '{text}' to an amount") from None

    return -result if negative else result


def parse(value: Optional[AmountInput], strict: bool = False) -> Decimal:
    """
    Read a user-entered amount.

    Numbers are taken as-is (floats through their shortest repr). Strings may
    carry currency symbols, thousands separators and either ',' or '.' as
    decimal marker; a leading '-' makes the amount negative.

    The result is NOT rounded: call round_amount() for a 2-digit value.

    Args:
        value: None, Decimal, int, float or free text typed in a form field
        strict: Raise InvalidAmountError instead of returning zero

    Returns:
        Parsed amount, or Decimal("0") when the value cannot be read

    Examples:
        >>> parse("R$ 1.234,56")
        Decimal('1234.56')
        >>> parse("$1,234.56")
        Decimal('1234.56')
        >>> parse("abc")
        Decimal('0')
        >>> parse("abc", strict=True)
        Traceback (most recent call last):
        InvalidAmountError: No digits in 'abc'
    """
    try:
        if value is None:
            raise InvalidAmountError("Amount is empty")
        if isinstance(value, str):
            return _parse_text(value, strict)
        return as_decimal(value)
    except InvalidAmountError as e:
        if strict:
            raise
        logger.debug("Unparseable amount coerced to zero", value=repr(value), reason=str(e))
        return Decimal("0")


# ============================================================================
# ARITHMETIC
# ============================================================================

def round_amount(amount: AmountInput) -> Decimal:
    """
    Round to 2 fractional digits, half away from zero.

    Examples:
        >>> round_amount(1.005)
        Decimal('1.01')
        >>> round_amount(Decimal("2.675"))
        Decimal('2.68')
        >>> round_amount(10)
        Decimal('10.00')
    """
    return from_cents(to_cents(amount))


def add(a: AmountInput, b: AmountInput) -> Decimal:
    """Exact sum of two amounts: add(0.1, 0.2) == Decimal("0.30")."""
    return from_cents(to_cents(a) + to_cents(b))


def subtract(a: AmountInput, b: AmountInput) -> Decimal:
    """Exact difference of two amounts."""
    return from_cents(to_cents(a) - to_cents(b))


def multiply(amount: AmountInput, factor: AmountInput) -> Decimal:
    """
    Multiply an amount by a (possibly fractional) factor.

    The product is rounded once, at the cent boundary.

    Examples:
        >>> multiply(Decimal("10.00"), 0.5)
        Decimal('5.00')
        >>> multiply(100, Decimal("0.1923"))  # exchange rate
        Decimal('19.23')
    """
    cents = to_cents(amount)
    return from_cents(_round_to_int(Decimal(cents) * as_decimal(factor)))


def divide(amount: AmountInput, divisor: AmountInput) -> Decimal:
    """
    Divide an amount, rounding once to the nearest cent.

    A zero divisor means "nothing to distribute": the result is 0.00,
    never an exception, NaN or Infinity.

    Examples:
        >>> divide(Decimal("10.00"), 3)
        Decimal('3.33')
        >>> divide(Decimal("10.00"), 0)
        Decimal('0.00')
    """
    divisor_value = as_decimal(divisor)
    if divisor_value == 0:
        logger.debug("Division by zero coerced to zero", amount=str(amount))
        return ZERO

    cents = to_cents(amount)
    return from_cents(_round_to_int(Decimal(cents) / divisor_value))


def sum_amounts(amounts: Iterable[AmountInput]) -> Decimal:
    """
    Sum any number of amounts without intermediate rounding error.

    Each element is turned into integer cents, the ints are accumulated and
    the total is scaled down once: the result does not depend on ordering.

    Examples:
        >>> sum_amounts([0.1] * 10)
        Decimal('1.00')
        >>> sum_amounts([])
        Decimal('0.00')
    """
    return from_cents(sum(to_cents(amount) for amount in amounts))


def percentage(amount: AmountInput, percent: AmountInput) -> Decimal:
    """Share of an amount: percentage(200, 15) == Decimal("30.00")."""
    return multiply(amount, as_decimal(percent) / 100)


def allocate(amount: AmountInput, parts: int) -> List[Decimal]:
    """
    Split an amount into equal shares that add back up to the exact amount.

    Leftover cents go to the first shares, one cent each. A non-positive
    number of parts yields an empty list (no distribution).

    Examples:
        >>> allocate(Decimal("100.00"), 3)
        [Decimal('33.34'), Decimal('33.33'), Decimal('33.33')]
        >>> allocate(Decimal("-0.05"), 2)
        [Decimal('-0.03'), Decimal('-0.02')]
    """
    if parts <= 0:
        return []

    cents = to_cents(amount)
    sign = -1 if cents < 0 else 1
    share, remainder = divmod(abs(cents), parts)

    return [
        from_cents(sign * (share + 1 if index < remainder else share))
        for index in range(parts)
        ]
