from django.conf import settings
from django.db import models


class CategoryType(models.TextChoices):
    INCOME = "income", "Income"
    EXPENSE = "expense", "Expense"


class Category(models.Model):
    """
    Per-user label for income or expense activity. Income and expense
    categories form disjoint trees through parent.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="categories"
    )
    name = models.CharField(max_length=120)
    type = models.CharField(max_length=10, choices=CategoryType.choices)
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
    )
    color = models.CharField(max_length=16, blank=True, null=True)
    icon = models.CharField(max_length=64, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    is_default = models.BooleanField(
        default=False, help_text="Seeded starter category."
    )

    class Meta:
        ordering = ["type", "name"]
        verbose_name_plural = "categories"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "type", "name"], name="uniq_category_user_type_name"
            )
        ]

    def __str__(self):
        return f"{self.name} ({self.type})"
