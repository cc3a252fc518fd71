from django.views.decorators.http import require_http_methods

from ledger.services.categories import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)
from ledger.views.utils import (
    api_response,
    ledger_api,
    parse_bool,
    parse_int,
    parse_text,
    read_json,
    with_hx_trigger,
)


def category_payload(category):
    return {
        "id": category.id,
        "name": category.name,
        "type": category.type,
        "parent_id": category.parent_id,
        "color": category.color,
        "icon": category.icon,
        "is_active": category.is_active,
        "is_default": category.is_default,
    }


@require_http_methods(["GET", "POST"])
@ledger_api
def category_collection(request):
    if request.method == "GET":
        items = [category_payload(category) for category in list_categories(request.user)]
        return api_response(items, "Categories loaded.")

    payload = read_json(request)
    category = create_category(
        request.user,
        name=parse_text(payload.get("name"), "name"),
        category_type=(parse_text(payload.get("type"), "type") or "").strip() or None,
        parent_id=parse_int(payload.get("parent_id"), "parent_id"),
        color=parse_text(payload.get("color"), "color"),
        icon=parse_text(payload.get("icon"), "icon"),
    )
    response = api_response(category_payload(category), "Category created.", status=201)
    return with_hx_trigger(request, response, "categories")


@require_http_methods(["GET", "PUT", "DELETE"])
@ledger_api
def category_detail(request, pk):
    if request.method == "GET":
        return api_response(category_payload(get_category(request.user, pk)), "Category loaded.")

    if request.method == "DELETE":
        delete_category(request.user, pk)
        return with_hx_trigger(request, api_response(None, "Category deleted."), "categories")

    payload = read_json(request)
    category = update_category(
        request.user,
        pk,
        name=parse_text(payload.get("name"), "name"),
        is_active=parse_bool(payload.get("is_active"), "is_active", default=True),
        parent_id=parse_int(payload.get("parent_id"), "parent_id"),
        color=parse_text(payload.get("color"), "color"),
        icon=parse_text(payload.get("icon"), "icon"),
        category_type=(parse_text(payload.get("type"), "type") or "").strip() or None,
    )
    return with_hx_trigger(request, api_response(category_payload(category), "Category updated."), "categories")
