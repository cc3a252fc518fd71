import logging
from decimal import Decimal

from django.db import transaction as db_transaction

from ledger.exceptions import ConflictError, NotFoundError, ValidationError
from ledger.models import Account, Transaction
from ledger.services.money import check_money

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "VND"


def _clean_name(name):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Account name is required.")
    return name


def _clean_currency(currency):
    return (currency or "").strip().upper() or DEFAULT_CURRENCY


def _clean_initial_balance(initial_balance):
    if initial_balance is None:
        return Decimal("0")
    return check_money(initial_balance, "Initial balance")


def list_accounts(user):
    return Account.objects.filter(user=user).order_by("-created_at", "-id")


def get_account(user, account_id, for_update=False):
    qs = Account.objects.filter(user=user)
    if for_update:
        qs = qs.select_for_update()
    account = qs.filter(pk=account_id).first()
    if account is None:
        raise NotFoundError("Account not found.")
    return account


def selectable_accounts(user):
    """
    Accounts that may be picked as the current wallet: active ones only.
    """
    return Account.objects.filter(user=user, is_active=True).order_by("name", "id")


def current_account(user, account_id=None):
    """
    The requested account when it is active and owned by the user, otherwise
    the first selectable account, otherwise None.
    """
    accounts = selectable_accounts(user)
    if account_id is not None:
        account = accounts.filter(pk=account_id).first()
        if account is not None:
            return account
    return accounts.first()


def create_account(user, name, account_type="", currency=DEFAULT_CURRENCY, initial_balance=Decimal("0")):
    account = Account.objects.create(
        user=user,
        name=_clean_name(name),
        type=(account_type or "").strip(),
        currency=_clean_currency(currency),
        initial_balance=_clean_initial_balance(initial_balance),
        is_active=True,
    )
    logger.info("Account created", extra={"user_id": user.pk, "account_id": account.pk})
    return account


def update_account(user, account_id, name, is_active, currency, account_type, initial_balance):
    """
    Update account metadata. Changing initial_balance shifts every derived
    balance of the account retroactively.
    """
    with db_transaction.atomic():
        account = get_account(user, account_id, for_update=True)
        account.name = _clean_name(name)
        account.is_active = bool(is_active)
        account.currency = _clean_currency(currency)
        account.type = (account_type or "").strip()
        if initial_balance is not None:
            account.initial_balance = _clean_initial_balance(initial_balance)
        account.save()

    logger.info(
        "Account updated",
        extra={"user_id": user.pk, "account_id": account.pk, "is_active": account.is_active},
    )
    return account


def delete_account(user, account_id):
    """
    Hard-delete an account together with its own transactions.
    """
    with db_transaction.atomic():
        account = get_account(user, account_id, for_update=True)
        incoming = Transaction.objects.filter(transfer_account=account).exclude(account=account)
        if incoming.exists():
            raise ConflictError(
                "Account receives transfers recorded on other accounts; delete those transfers first."
            )
        deleted, _per_model = account.delete()

    logger.info(
        "Account deleted",
        extra={"user_id": user.pk, "account_id": account_id, "rows_deleted": deleted},
    )
