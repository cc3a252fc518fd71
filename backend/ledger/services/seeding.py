import logging

from django.db import transaction as db_transaction

from ledger.models import Category, CategoryType

logger = logging.getLogger(__name__)

# (name, icon, color)
DEFAULT_EXPENSE_CATEGORIES = [
    ("Food & Dining", "🍽️", "#f59e0b"),
    ("Daily Spending", "🧾", "#9ca3af"),
    ("Clothing", "👕", "#a855f7"),
    ("Cosmetics", "💄", "#f472b6"),
    ("Social", "🫱🏻‍🫲🏼", "#22c55e"),
    ("Healthcare", "🩺", "#ef4444"),
    ("Education", "📚", "#06b6d4"),
    ("Electricity", "⚡", "#fde047"),
    ("Transportation", "🚗", "#3b82f6"),
    ("Phone & Internet", "📞", "#10b981"),
    ("Housing", "🏠", "#8b5cf6"),
]

DEFAULT_INCOME_CATEGORIES = [
    ("Salary", "💵", "#16a34a"),
    ("Allowance", "💰", "#22c55e"),
    ("Bonus", "🏆", "#84cc16"),
    ("Side Income", "🪙", "#4ade80"),
    ("Investment", "📈", "#0ea5e9"),
]


def _catalogue(user):
    for category_type, entries in (
        (CategoryType.EXPENSE, DEFAULT_EXPENSE_CATEGORIES),
        (CategoryType.INCOME, DEFAULT_INCOME_CATEGORIES),
    ):
        for name, icon, color in entries:
            yield Category(
                user=user,
                name=name,
                type=category_type,
                icon=icon,
                color=color,
                is_active=True,
                is_default=True,
            )


def seed_default_categories(user):
    """
    Give a user the starter categories. Does nothing when the user already
    owns any category. Returns the number of categories inserted.
    """
    with db_transaction.atomic():
        if Category.objects.filter(user=user).exists():
            return 0
        created = Category.objects.bulk_create(list(_catalogue(user)))

    logger.info("Default categories seeded", extra={"user_id": user.pk, "count": len(created)})
    return len(created)
