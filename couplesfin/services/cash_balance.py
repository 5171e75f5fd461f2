"""
Cash balance calculations over a user's active cash accounts.

Accounts are passed in (already fetched by the caller); nothing here touches
the data store. Totals across currencies go through services.fx, so they are
cent-exact and independent of account ordering.
"""
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import structlog

from couplesfin.config import get_settings
from couplesfin.schemas.accounts import CashAccount, CashBalanceSummary
from couplesfin.schemas.fx import RateTable
from couplesfin.services.fx import aggregate_across_currencies, try_convert
from couplesfin.utils import money_math
from couplesfin.utils.currency_utils import format_amount_plain
from couplesfin.utils.money_math import AmountInput
from couplesfin.utils.validation_utils import normalize_currency_code

logger = structlog.get_logger(__name__)

INSUFFICIENT_CASH_MESSAGE = "Saldo insuficiente em dinheiro. Disponível: {balance} {currency}"


def _balances_by_currency(accounts: Iterable[CashAccount]) -> Dict[str, Decimal]:
    cents: Dict[str, int] = {}
    for account in accounts:
        cents[account.currency] = cents.get(account.currency, 0) + money_math.to_cents(account.balance)
    return {code: money_math.from_cents(value) for code, value in sorted(cents.items())}


def get_cash_balance(accounts: Iterable[CashAccount], currency: str) -> Decimal:
    """
    Cash held in one currency (sum of the accounts in that currency).

    Returns:
        Balance, 0.00 when no account uses the currency
    """
    code = normalize_currency_code(currency)
    return money_math.sum_amounts(account.balance for account in accounts if account.currency == code)


def get_total_cash_balance(
    accounts: Iterable[CashAccount],
    rate_table: RateTable,
    target_currency: Optional[str] = None
    ) -> Decimal:
    """
    Total cash across currencies, expressed in target_currency.

    Args:
        accounts: Cash accounts
        rate_table: Rates to use
        target_currency: Currency of the total (default: BASE_CURRENCY setting)

    Raises:
        RateNotFoundError: If an account currency cannot be converted
    """
    target = target_currency or get_settings().BASE_CURRENCY
    return aggregate_across_currencies(
        ((account.balance, account.currency) for account in accounts),
        target,
        rate_table,
        )


def summarize_cash_balances(
    accounts: Iterable[CashAccount],
    rate_table: RateTable,
    target_currency: Optional[str] = None
    ) -> CashBalanceSummary:
    """
    Per-currency balances plus the total in target_currency.

    Unlike get_total_cash_balance(), a currency without a rate path does not
    fail the whole summary: it is left out of the total and listed in
    unconverted_currencies, so the caller can flag the total as partial.
    """
    target = normalize_currency_code(target_currency or get_settings().BASE_CURRENCY)
    accounts = list(accounts)

    # Accounts are converted one by one, as in get_total_cash_balance()
    converted: List[Decimal] = []
    unconverted: List[str] = []
    for account in accounts:
        value = try_convert(account.balance, account.currency, target, rate_table)
        if value is not None:
            converted.append(value)
        elif account.currency not in unconverted:
            unconverted.append(account.currency)

    if unconverted:
        logger.warning("Cash total is partial", target_currency=target, unconverted=unconverted)

    return CashBalanceSummary(
        total=money_math.sum_amounts(converted),
        currency=target,
        by_currency=_balances_by_currency(accounts),
        unconverted_currencies=sorted(unconverted),
        )


def can_spend_cash(accounts: Iterable[CashAccount], amount: AmountInput, currency: str) -> bool:
    """True if the cash held in `currency` covers `amount`."""
    return get_cash_balance(accounts, currency) >= money_math.round_amount(amount)


def get_cash_balance_error(accounts: Iterable[CashAccount], amount: AmountInput, currency: str) -> Optional[str]:
    """
    Message to show when a cash expense exceeds the available balance.

    Returns:
        None if the expense is covered, otherwise
        'Saldo insuficiente em dinheiro. Disponível: 50.00 BRL'
    """
    accounts = list(accounts)
    if can_spend_cash(accounts, amount, currency):
        return None

    code = normalize_currency_code(currency)
    balance = get_cash_balance(accounts, code)
    return INSUFFICIENT_CASH_MESSAGE.format(balance=format_amount_plain(balance), currency=code)

