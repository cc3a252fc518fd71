from django.views.decorators.http import require_GET, require_http_methods

from ledger.permissions import assert_ledger_admin
from ledger.services.users import get_user, list_users, set_user_active, set_user_role, user_role
from ledger.views.utils import api_response, ledger_api, parse_bool, parse_int, parse_text, read_json


def user_payload(user):
    return {
        "id": user.id,
        "username": user.get_username(),
        "email": user.email,
        "name": user.get_full_name(),
        "is_active": user.is_active,
        "role": user_role(user),
        "created_at": user.date_joined,
    }


@require_GET
@ledger_api
def user_list(request):
    assert_ledger_admin(request.user)
    page_size = parse_int(request.GET.get("page_size"), "page_size") or 20
    page_obj = list_users(
        keyword=request.GET.get("keyword"),
        page=request.GET.get("page") or 1,
        page_size=max(1, min(page_size, 100)),
    )
    data = {
        "items": [user_payload(user) for user in page_obj.object_list],
        "page": page_obj.number,
        "page_size": page_obj.paginator.per_page,
        "total": page_obj.paginator.count,
    }
    return api_response(data, "Users loaded.")


@require_GET
@ledger_api
def user_detail(request, pk):
    assert_ledger_admin(request.user)
    return api_response(user_payload(get_user(pk)), "User loaded.")


@require_http_methods(["PUT"])
@ledger_api
def user_set_role(request, pk):
    assert_ledger_admin(request.user)
    payload = read_json(request)
    user = set_user_role(pk, parse_text(payload.get("role"), "role"))
    return api_response(user_payload(user), "Role updated.")


@require_http_methods(["PUT"])
@ledger_api
def user_set_status(request, pk):
    assert_ledger_admin(request.user)
    active = parse_bool(request.GET.get("active"), "active", default=True)
    user = set_user_active(pk, active)
    message = "User activated." if active else "User deactivated."
    return api_response(user_payload(user), message)
