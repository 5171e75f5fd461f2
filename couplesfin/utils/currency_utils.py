"""
Currency display utilities with multi-language support via Babel.

Provides currency names/symbols and locale-aware formatting of amounts.
Amounts are rounded to the cent (money_math.round_amount) before display,
so what the user reads always matches what the arithmetic kept.
"""

from typing import Iterable, List, Optional

import structlog
from babel.numbers import (
    format_compact_currency,
    format_currency as babel_format_currency,
    get_currency_name,
    get_currency_symbol,
)
from pydantic import BaseModel, ConfigDict, Field

from couplesfin.config import get_settings
from couplesfin.utils import money_math
from couplesfin.utils.money_math import AmountInput
from couplesfin.utils.translation_utils import get_babel_locale
from couplesfin.utils.validation_utils import normalize_currency_code

logger = structlog.get_logger(__name__)


class CurrencyInfo(BaseModel):
    """Display information for a currency in a given language."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="ISO 4217 currency code")
    symbol: str = Field(..., description="Localized symbol (R$, US$, €)")
    name: str = Field(..., description="Localized currency name")


def get_currency_info(code: str, language: str = "pt") -> CurrencyInfo:
    """
    Localized symbol and name of a currency.

    Args:
        code: ISO 4217 code (case-insensitive)
        language: Babel language or locale identifier (default: 'pt')

    Raises:
        ValueError: If the code is not ISO 4217

    Example:
        >>> get_currency_info("brl", "pt_BR")
        CurrencyInfo(code='BRL', symbol='R$', name='Real brasileiro')
    """
    iso_code = normalize_currency_code(code)
    locale = get_babel_locale(language)
    return CurrencyInfo(
        code=iso_code,
        symbol=get_currency_symbol(iso_code, locale=locale),
        name=get_currency_name(iso_code, locale=locale),
        )


def list_currencies(language: str = "pt", codes: Optional[Iterable[str]] = None) -> List[CurrencyInfo]:
    """
    Display information for a list of currencies.

    Args:
        language: Babel language or locale identifier
        codes: Currencies to describe (default: SUPPORTED_CURRENCIES setting)
    """
    if codes is None:
        codes = get_settings().SUPPORTED_CURRENCIES
    return [get_currency_info(code, language) for code in codes]


def format_currency(amount: AmountInput, currency: str, locale: Optional[str] = None) -> str:
    """
    Format an amount for display, always with 2 fractional digits.

    Args:
        amount: Amount (rounded to the cent before formatting)
        currency: ISO 4217 code
        locale: Babel locale (default: DEFAULT_LOCALE setting, pt_BR)

    Examples:
        >>> format_currency(Decimal("1234.5"), "BRL")
        'R$\\xa01.234,50'
        >>> format_currency(1234.5, "USD", "en_US")
        '$1,234.50'
    """
    iso_code = normalize_currency_code(currency)
    babel_locale = get_babel_locale(locale or get_settings().DEFAULT_LOCALE)
    return babel_format_currency(money_math.round_amount(amount), iso_code, locale=babel_locale)


def format_currency_compact(amount: AmountInput, currency: str, locale: Optional[str] = None) -> str:
    """
    Short notation for dashboards: 'R$ 1,2 mil', '$1.2K'.

    Falls back to format_currency() when Babel has no compact pattern for the locale.
    """
    iso_code = normalize_currency_code(currency)
    babel_locale = get_babel_locale(locale or get_settings().DEFAULT_LOCALE)
    value = money_math.round_amount(amount)
    try:
        return format_compact_currency(value, iso_code, locale=babel_locale, fraction_digits=1)
    except (KeyError, ValueError) as e:
        logger.debug("Compact currency format unavailable", locale=str(babel_locale), error=str(e))
        return format_currency(value, iso_code, str(babel_locale))


def format_amount_plain(amount: AmountInput) -> str:
    """Amount with 2 digits and a dot marker, no symbol: '1234.50'."""
    return f"{money_math.round_amount(amount):.2f}"
