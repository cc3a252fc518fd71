import logging

from django.contrib.auth import get_user_model
from django.core.paginator import Paginator
from django.db.models import Q

from ledger.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


def user_role(user):
    return ROLE_ADMIN if user.is_staff else ROLE_USER


def get_user(user_id):
    user = get_user_model().objects.filter(pk=user_id).first()
    if user is None:
        raise NotFoundError("User not found.")
    return user


def list_users(keyword=None, page=1, page_size=20):
    """Newest users first, optionally filtered by a keyword; returns a Page."""
    qs = get_user_model().objects.order_by("-date_joined", "-id")
    keyword = (keyword or "").strip()
    if keyword:
        qs = qs.filter(
            Q(username__icontains=keyword)
            | Q(email__icontains=keyword)
            | Q(first_name__icontains=keyword)
            | Q(last_name__icontains=keyword)
        )
    paginator = Paginator(qs, page_size)
    return paginator.get_page(page)


def set_user_role(user_id, role):
    if role not in ROLES:
        raise ValidationError("Role must be user or admin.")
    user = get_user(user_id)
    user.is_staff = role == ROLE_ADMIN
    user.save(update_fields=["is_staff"])
    logger.info("User role changed", extra={"target_user_id": user.pk, "role": role})
    return user


def set_user_active(user_id, active):
    """Soft (de)activation; users are never hard-deleted here."""
    user = get_user(user_id)
    user.is_active = bool(active)
    user.save(update_fields=["is_active"])
    logger.info("User active flag changed", extra={"target_user_id": user.pk, "active": user.is_active})
    return user
