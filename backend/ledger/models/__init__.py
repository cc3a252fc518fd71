from .account import Account
from .category import Category, CategoryType
from .transaction import Transaction, TransactionType

__all__ = [
    "Account",
    "Category",
    "CategoryType",
    "Transaction",
    "TransactionType",
]
