from django.contrib.auth.models import AbstractBaseUser
from django.core.exceptions import PermissionDenied


def is_ledger_admin(user: AbstractBaseUser) -> bool:
    """Centralized gate for user administration."""
    if not user.is_authenticated:
        return False
    return bool(user.is_active and user.is_staff)


def assert_ledger_admin(user: AbstractBaseUser) -> None:
    if not is_ledger_admin(user):
        raise PermissionDenied("Administrator role required.")
