from decimal import Decimal

from django.views.decorators.http import require_GET, require_http_methods

from ledger.services.accounts import (
    create_account,
    delete_account,
    get_account,
    list_accounts,
    update_account,
)
from ledger.services.reports import account_balance
from ledger.views.utils import (
    api_response,
    ledger_api,
    parse_bool,
    parse_decimal,
    parse_text,
    read_json,
    with_hx_trigger,
)


def account_payload(account):
    return {
        "id": account.id,
        "name": account.name,
        "type": account.type,
        "currency": account.currency,
        "initial_balance": account.initial_balance,
        "is_active": account.is_active,
        "created_at": account.created_at,
    }


@require_http_methods(["GET", "POST"])
@ledger_api
def account_collection(request):
    if request.method == "GET":
        items = [account_payload(account) for account in list_accounts(request.user)]
        return api_response(items, "Accounts loaded.")

    payload = read_json(request)
    account = create_account(
        request.user,
        name=parse_text(payload.get("name"), "name"),
        account_type=parse_text(payload.get("type"), "type"),
        currency=parse_text(payload.get("currency"), "currency"),
        initial_balance=parse_decimal(payload.get("initial_balance"), "initial_balance") or Decimal("0"),
    )
    response = api_response(account_payload(account), "Account created.", status=201)
    return with_hx_trigger(request, response, "accounts")


@require_http_methods(["GET", "PUT", "DELETE"])
@ledger_api
def account_detail(request, pk):
    if request.method == "GET":
        return api_response(account_payload(get_account(request.user, pk)), "Account loaded.")

    if request.method == "DELETE":
        delete_account(request.user, pk)
        return with_hx_trigger(request, api_response(None, "Account deleted."), "accounts")

    payload = read_json(request)
    account = update_account(
        request.user,
        pk,
        name=parse_text(payload.get("name"), "name"),
        is_active=parse_bool(payload.get("is_active"), "is_active", default=True),
        currency=parse_text(payload.get("currency"), "currency"),
        account_type=parse_text(payload.get("type"), "type"),
        initial_balance=parse_decimal(payload.get("initial_balance"), "initial_balance"),
    )
    return with_hx_trigger(request, api_response(account_payload(account), "Account updated."), "accounts")


@require_GET
@ledger_api
def account_balance_view(request, pk):
    result = account_balance(request.user, pk)
    data = {
        "account_id": result.account.id,
        "currency": result.account.currency,
        "initial_balance": result.initial_balance,
        "current_balance": result.current_balance,
    }
    return api_response(data, "Balance computed.")
