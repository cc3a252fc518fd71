from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from django.utils import timezone

from ledger import projection
from ledger.models import Account, Transaction, TransactionType
from ledger.services.accounts import current_account, get_account
from ledger.services.transactions import list_transactions


@dataclass(frozen=True)
class AccountBalance:
    account: Account
    initial_balance: Decimal
    current_balance: Decimal


@dataclass(frozen=True)
class Dashboard:
    account: Optional[Account]
    balance: Decimal
    month: projection.MonthlySummary
    expense_by_category: List[projection.CategoryShare] = field(default_factory=list)
    income_by_category: List[projection.CategoryShare] = field(default_factory=list)


def _account_transactions(user, account):
    return tuple(
        Transaction.objects.filter(user=user, account=account).only(
            "id", "type", "amount", "trx_date", "category_id"
        )
    )


def account_balance(user, account_id):
    account = get_account(user, account_id)
    balance = projection.current_balance(account.initial_balance, _account_transactions(user, account))
    return AccountBalance(
        account=account,
        initial_balance=account.initial_balance,
        current_balance=balance,
    )


def dashboard(user, account_id=None, year=None, month=None, today=None):
    """
    Current wallet overview: derived balance plus one month of aggregates.

    Falls back to the first active account when account_id is missing,
    inactive or foreign. Without any active account the figures are zero.
    """
    today = today or timezone.localdate()
    year = year or today.year
    month = month or today.month

    account = current_account(user, account_id)
    if account is None:
        return Dashboard(
            account=None,
            balance=projection.ZERO,
            month=projection.monthly_summary((), year, month, today),
        )

    rows = _account_transactions(user, account)
    window = projection.transactions_in_month(rows, year, month)
    return Dashboard(
        account=account,
        balance=projection.current_balance(account.initial_balance, rows),
        month=projection.monthly_summary(rows, year, month, today),
        expense_by_category=projection.category_breakdown(window, TransactionType.EXPENSE),
        income_by_category=projection.category_breakdown(window, TransactionType.INCOME),
    )


def summary(
    user,
    account_id=None,
    category_id=None,
    date_from=None,
    date_to=None,
    transaction_type=None,
):
    rows = list_transactions(
        user,
        date_from=date_from,
        date_to=date_to,
        account_id=account_id,
        category_id=category_id,
        transaction_type=transaction_type,
    )
    return projection.summarize(rows)
