from django.conf import settings
from django.db import models

from .account import Account
from .category import Category


class TransactionType(models.TextChoices):
    INCOME = "income", "Income"
    EXPENSE = "expense", "Expense"
    TRANSFER = "transfer", "Transfer"


class Transaction(models.Model):
    """
    A single dated money movement. Amount is always positive; direction
    comes from type.
    Type rules:
    - income: category (income) required, transfer_account forbidden
    - expense: category (expense) required, transfer_account forbidden
    - transfer: transfer_account required and different from account, category forbidden
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="transactions"
    )
    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name="transactions")
    type = models.CharField(max_length=10, choices=TransactionType.choices)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    trx_date = models.DateTimeField()
    category = models.ForeignKey(
        Category,
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name="transactions",
    )
    note = models.TextField(blank=True, null=True)
    transfer_account = models.ForeignKey(
        Account,
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name="incoming_transfers",
        help_text="Receiving account; set only for transfers.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-trx_date", "-id"]
        indexes = [
            models.Index(fields=["user", "trx_date"], name="ledger_trx_user_date_idx"),
        ]

    def __str__(self):
        return f"{self.trx_date:%Y-%m-%d} {self.type} {self.amount} {self.account}"
