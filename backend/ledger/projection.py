"""
Derived balances and report aggregates.

Everything here is a pure computation over values already loaded from the
database: the functions never query, never write, and never mutate their
inputs. The same input always yields the same Decimal output.

A transaction is anything exposing ``type``, ``amount``, ``trx_date`` and
``category_id``; model instances and plain records both work.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from ledger.models import TransactionType

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
WHOLE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Summary:
    total_income: Decimal
    total_expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    income: Decimal
    expense: Decimal
    net: Decimal
    count: int
    days_elapsed: int
    average_daily_expense: Decimal
    savings_rate: int


@dataclass(frozen=True)
class CategoryShare:
    category_id: int
    amount: Decimal
    percentage: int


def _as_decimal(value):
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _percent(part, whole):
    return int((part / whole * HUNDRED).quantize(WHOLE, rounding=ROUND_HALF_UP))


def _total(transactions, transaction_type):
    return sum(
        (_as_decimal(t.amount) for t in transactions if t.type == transaction_type),
        ZERO,
    )


def in_month(value, year, month):
    """True when value (date or datetime) falls inside the given calendar month."""
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.year == year and value.month == month


def transactions_in_month(transactions, year, month):
    return tuple(t for t in transactions if in_month(t.trx_date, year, month))


def days_elapsed(year, month, today):
    """
    Denominator for the average daily expense.

    The month being viewed counts only the days so far when it is the current
    month; any other month counts all of its days.
    """
    if (today.year, today.month) == (year, month):
        return today.day
    return calendar.monthrange(year, month)[1]


def current_balance(initial_balance, transactions):
    """
    initial_balance + income - expense across every transaction given.

    Transfers are not part of the sum: a transfer row is stored once on the
    source account and currently moves no money on either side.
    """
    transactions = tuple(transactions)
    income = _total(transactions, TransactionType.INCOME)
    expense = _total(transactions, TransactionType.EXPENSE)
    return _as_decimal(initial_balance) + income - expense


def summarize(transactions):
    transactions = tuple(transactions)
    income = _total(transactions, TransactionType.INCOME)
    expense = _total(transactions, TransactionType.EXPENSE)
    return Summary(total_income=income, total_expense=expense, net=income - expense)


def savings_rate(income, expense):
    """Share of income kept, as a whole percentage clamped to 0..100."""
    if income <= 0:
        return 0
    return max(0, min(100, _percent(income - expense, income)))


def monthly_summary(transactions, year, month, today):
    window = transactions_in_month(tuple(transactions), year, month)
    income = _total(window, TransactionType.INCOME)
    expense = _total(window, TransactionType.EXPENSE)
    days = days_elapsed(year, month, today)
    average = (expense / days).quantize(CENT, rounding=ROUND_HALF_UP) if days else ZERO
    return MonthlySummary(
        year=year,
        month=month,
        income=income,
        expense=expense,
        net=income - expense,
        count=len(window),
        days_elapsed=days,
        average_daily_expense=average,
        savings_rate=savings_rate(income, expense),
    )


def category_breakdown(transactions, transaction_type):
    """
    Group transactions of one type by category, largest total first.

    Each share carries its whole-number percentage of the grand total,
    rounded half up. Categories with a zero total are left out.
    """
    totals = {}
    for t in transactions:
        if t.type != transaction_type or t.category_id is None:
            continue
        totals[t.category_id] = totals.get(t.category_id, ZERO) + _as_decimal(t.amount)

    grand_total = sum(totals.values(), ZERO)
    if grand_total <= 0:
        return []
    shares = [
        CategoryShare(category_id=category_id, amount=amount, percentage=_percent(amount, grand_total))
        for category_id, amount in totals.items()
        if amount > 0
    ]
    shares.sort(key=lambda share: (-share.amount, share.category_id))
    return shares
