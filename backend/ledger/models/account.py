from django.conf import settings
from django.db import models


class Account(models.Model):
    """
    A wallet. Balance is always derived from initial_balance plus transactions
    (no stored balance column).
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="accounts"
    )
    name = models.CharField(max_length=120)
    type = models.CharField(
        max_length=50, blank=True, help_text="Free-text label such as personal or family."
    )
    currency = models.CharField(max_length=10, default="VND")
    initial_balance = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive accounts keep their history but are never the current wallet.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name
