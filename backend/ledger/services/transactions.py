import logging

from django.db import transaction as db_transaction

from ledger.exceptions import NotFoundError, ValidationError
from ledger.models import Account, Category, CategoryType, Transaction, TransactionType
from ledger.services.money import check_money

logger = logging.getLogger(__name__)

# Category type an income/expense transaction must reference.
CATEGORY_TYPE_FOR = {
    TransactionType.INCOME: CategoryType.INCOME,
    TransactionType.EXPENSE: CategoryType.EXPENSE,
}


def validate_transaction(user, account, transaction_type, amount, category_id=None, transfer_account_id=None):
    """
    Check a proposed transaction against the rules of its type.

    - every type: amount > 0 with at most two decimal places, and small
      enough for the amount column
    - income / expense: category required and owned by the user
      with the matching type, transfer_account forbidden
    - transfer: category forbidden, transfer_account required,
      owned by the user and different from account

    Returns the resolved (category, transfer_account) pair. Raises
    ValidationError naming the first rule that fails; nothing is written.
    """
    if amount is None:
        raise ValidationError("Amount must be greater than 0.")
    amount = check_money(amount, "Amount")
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0.")

    if transaction_type == TransactionType.TRANSFER:
        if category_id is not None:
            raise ValidationError("Transfer must not have a category_id.")
        if transfer_account_id is None:
            raise ValidationError("Transfer requires transfer_account_id.")
        if transfer_account_id == account.pk:
            raise ValidationError("Transfer source and destination accounts must differ.")
        transfer_account = Account.objects.filter(pk=transfer_account_id, user=user).first()
        if transfer_account is None:
            raise ValidationError("Transfer destination account is invalid.")
        return None, transfer_account

    if transaction_type in CATEGORY_TYPE_FOR:
        label = TransactionType(transaction_type).label
        if transfer_account_id is not None:
            raise ValidationError(f"{label} must not have a transfer_account_id.")
        if category_id is None:
            raise ValidationError(f"{label} requires category_id.")
        category = Category.objects.filter(pk=category_id, user=user).first()
        if category is None:
            raise ValidationError("Category is invalid.")
        if category.type != CATEGORY_TYPE_FOR[transaction_type]:
            raise ValidationError(f"Category does not belong to the {transaction_type} type.")
        return category, None

    raise ValidationError("Transaction type must be income, expense or transfer.")


def list_transactions(
    user,
    date_from=None,
    date_to=None,
    account_id=None,
    category_id=None,
    transaction_type=None,
):
    """
    Filtered transactions, newest trx_date first and highest id first on ties.
    """
    qs = Transaction.objects.filter(user=user)
    if date_from is not None:
        qs = qs.filter(trx_date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(trx_date__lte=date_to)
    if account_id is not None:
        qs = qs.filter(account_id=account_id)
    if category_id is not None:
        qs = qs.filter(category_id=category_id)
    if transaction_type:
        qs = qs.filter(type=transaction_type)
    return qs.order_by("-trx_date", "-id")


def get_transaction(user, transaction_id, for_update=False):
    qs = Transaction.objects.filter(user=user)
    if for_update:
        qs = qs.select_for_update()
    txn = qs.filter(pk=transaction_id).first()
    if txn is None:
        raise NotFoundError("Transaction not found.")
    return txn


def create_transaction(
    user,
    account_id,
    transaction_type,
    amount,
    trx_date,
    category_id=None,
    note=None,
    transfer_account_id=None,
):
    with db_transaction.atomic():
        account = Account.objects.filter(pk=account_id, user=user).first()
        if account is None:
            raise ValidationError("Account is invalid.")
        category, transfer_account = validate_transaction(
            user, account, transaction_type, amount, category_id, transfer_account_id
        )
        if trx_date is None:
            raise ValidationError("trx_date is required.")
        txn = Transaction.objects.create(
            user=user,
            account=account,
            type=transaction_type,
            amount=amount,
            trx_date=trx_date,
            category=category,
            note=note,
            transfer_account=transfer_account,
        )

    logger.info(
        "Transaction created",
        extra={"user_id": user.pk, "transaction_id": txn.pk, "account_id": account.pk, "type": txn.type},
    )
    return txn


def update_transaction(
    user,
    transaction_id,
    transaction_type,
    amount,
    trx_date,
    category_id=None,
    note=None,
    transfer_account_id=None,
    account_id=None,
):
    """
    Replace the mutable fields of a transaction.

    The rules run against the proposed values. The account is fixed at
    creation; passing a different account_id is rejected.
    """
    with db_transaction.atomic():
        txn = get_transaction(user, transaction_id, for_update=True)
        if account_id is not None and account_id != txn.account_id:
            raise ValidationError("Account of an existing transaction cannot be changed.")
        category, transfer_account = validate_transaction(
            user, txn.account, transaction_type, amount, category_id, transfer_account_id
        )
        if trx_date is None:
            raise ValidationError("trx_date is required.")
        txn.type = transaction_type
        txn.amount = amount
        txn.trx_date = trx_date
        txn.category = category
        txn.note = note
        txn.transfer_account = transfer_account
        txn.save()

    logger.info("Transaction updated", extra={"user_id": user.pk, "transaction_id": txn.pk})
    return txn


def delete_transaction(user, transaction_id):
    with db_transaction.atomic():
        txn = get_transaction(user, transaction_id, for_update=True)
        txn.delete()
    logger.info("Transaction deleted", extra={"user_id": user.pk, "transaction_id": transaction_id})
