import collections
import logging

from django.db import transaction as db_transaction

from ledger.exceptions import ConflictError, NotFoundError, ValidationError
from ledger.models import Category, CategoryType

logger = logging.getLogger(__name__)


def _normalize_parent_id(parent_id):
    # Clients send 0 for "no parent".
    if parent_id in (None, 0):
        return None
    return parent_id


def _clean_name(name):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required.")
    return name


def _resolve_parent(user, parent_id, category_type):
    parent = Category.objects.filter(pk=parent_id, user=user).first()
    if parent is None:
        raise ValidationError("Parent category does not exist or belongs to another user.")
    if parent.type != category_type:
        raise ValidationError("Parent category type must match the category type.")
    return parent


def _name_taken(user, category_type, name, exclude_pk=None):
    qs = Category.objects.filter(user=user, type=category_type, name=name)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


def is_descendant(user, ancestor_id, candidate_id):
    """
    Return True when candidate_id lies anywhere below ancestor_id in the
    user's category tree.

    The tree is loaded with a single query into an in-memory children map and
    walked breadth-first from ancestor_id; each node is visited at most once.
    """
    children_map = collections.defaultdict(list)
    edges = Category.objects.filter(user=user, parent__isnull=False).values_list("id", "parent_id")
    for category_id, parent_id in edges:
        children_map[parent_id].append(category_id)

    visited = set()
    queue = collections.deque(children_map.get(ancestor_id, []))
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        if current == candidate_id:
            return True
        visited.add(current)
        queue.extend(children_map.get(current, []))
    return False


def list_categories(user):
    return Category.objects.filter(user=user).order_by("type", "name", "id")


def get_category(user, category_id, for_update=False):
    qs = Category.objects.filter(user=user)
    if for_update:
        qs = qs.select_for_update()
    category = qs.filter(pk=category_id).first()
    if category is None:
        raise NotFoundError("Category not found.")
    return category


def create_category(user, name, category_type, parent_id=None, color=None, icon=None):
    name = _clean_name(name)
    if category_type not in CategoryType.values:
        raise ValidationError("Category type must be income or expense.")

    with db_transaction.atomic():
        if _name_taken(user, category_type, name):
            raise ConflictError("A category with this name already exists for this type.")
        parent_id = _normalize_parent_id(parent_id)
        parent = None
        if parent_id is not None:
            parent = _resolve_parent(user, parent_id, category_type)
        category = Category.objects.create(
            user=user,
            name=name,
            type=category_type,
            parent=parent,
            color=color,
            icon=icon,
            is_active=True,
            is_default=False,
        )

    logger.info(
        "Category created",
        extra={"user_id": user.pk, "category_id": category.pk, "parent_id": parent_id},
    )
    return category


def update_category(
    user,
    category_id,
    name,
    is_active,
    parent_id=None,
    color=None,
    icon=None,
    category_type=None,
):
    """
    Rename, recolor, (de)activate or re-parent a category.

    The type is fixed at creation; a supplied category_type is accepted only
    when it equals the stored one. A new parent must belong to the same user,
    share the type, and must not sit below the category itself.
    """
    with db_transaction.atomic():
        category = get_category(user, category_id, for_update=True)
        if category_type is not None and category_type != category.type:
            raise ValidationError("Category type cannot be changed.")

        name = _clean_name(name)
        if _name_taken(user, category.type, name, exclude_pk=category.pk):
            raise ConflictError("A category with this name already exists for this type.")

        parent_id = _normalize_parent_id(parent_id)
        parent = None
        if parent_id is not None:
            if parent_id == category.pk:
                raise ValidationError("Category cannot be its own parent.")
            parent = _resolve_parent(user, parent_id, category.type)
            if is_descendant(user, category.pk, parent.pk):
                logger.warning(
                    "Category cycle rejected",
                    extra={"user_id": user.pk, "category_id": category.pk, "parent_id": parent.pk},
                )
                raise ValidationError("Parent category is invalid: it would create a cycle.")

        category.name = name
        category.is_active = bool(is_active)
        category.color = color
        category.icon = icon
        category.parent = parent
        category.save()

    logger.info("Category updated", extra={"user_id": user.pk, "category_id": category.pk})
    return category


def delete_category(user, category_id):
    """
    Remove a category, moving its direct children to the root first.

    Grandchildren keep their parents. A category that transactions still
    reference is kept; deactivate it instead.
    """
    with db_transaction.atomic():
        category = get_category(user, category_id, for_update=True)
        if category.transactions.exists():
            raise ConflictError("Category is used by transactions; deactivate it instead.")
        moved = Category.objects.filter(user=user, parent=category).update(parent=None)
        category.delete()

    logger.info(
        "Category deleted",
        extra={"user_id": user.pk, "category_id": category_id, "children_moved": moved},
    )
