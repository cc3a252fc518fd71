from django.core.paginator import Paginator
from django.views.decorators.http import require_http_methods

from ledger.exceptions import ValidationError
from ledger.models import TransactionType
from ledger.services.transactions import (
    create_transaction,
    delete_transaction,
    get_transaction,
    list_transactions,
    update_transaction,
)
from ledger.views.utils import (
    api_response,
    ledger_api,
    parse_decimal,
    parse_int,
    parse_moment,
    parse_text,
    read_json,
    with_hx_trigger,
)

PAGE_SIZES = (25, 50, 100)


def transaction_payload(txn):
    return {
        "id": txn.id,
        "account_id": txn.account_id,
        "type": txn.type,
        "amount": txn.amount,
        "trx_date": txn.trx_date,
        "category_id": txn.category_id,
        "note": txn.note,
        "transfer_account_id": txn.transfer_account_id,
        "created_at": txn.created_at,
    }


def parse_type_filter(value):
    value = (value or "").strip()
    if value and value not in TransactionType.values:
        raise ValidationError("type must be income, expense or transfer.")
    return value or None


def filters_from_query(params):
    return {
        "date_from": parse_moment(params.get("date_from"), "date_from"),
        "date_to": parse_moment(params.get("date_to"), "date_to", end_of_day=True),
        "account_id": parse_int(params.get("account_id"), "account_id"),
        "category_id": parse_int(params.get("category_id"), "category_id"),
        "transaction_type": parse_type_filter(params.get("type")),
    }


def _fields_from_payload(payload):
    return {
        "transaction_type": parse_text(payload.get("type"), "type"),
        "amount": parse_decimal(payload.get("amount"), "amount", required=True),
        "trx_date": parse_moment(payload.get("trx_date"), "trx_date", required=True),
        "category_id": parse_int(payload.get("category_id"), "category_id"),
        "note": parse_text(payload.get("note"), "note"),
        "transfer_account_id": parse_int(payload.get("transfer_account_id"), "transfer_account_id"),
    }


@require_http_methods(["GET", "POST"])
@ledger_api
def transaction_collection(request):
    if request.method == "POST":
        payload = read_json(request)
        txn = create_transaction(
            request.user,
            account_id=parse_int(payload.get("account_id"), "account_id", required=True),
            **_fields_from_payload(payload),
        )
        response = api_response(transaction_payload(txn), "Transaction created.", status=201)
        return with_hx_trigger(request, response, "transactions")

    qs = list_transactions(request.user, **filters_from_query(request.GET))
    if not request.GET.get("page"):
        return api_response([transaction_payload(txn) for txn in qs], "Transactions loaded.")

    try:
        page_size = int(request.GET.get("page_size") or PAGE_SIZES[0])
    except (TypeError, ValueError):
        page_size = PAGE_SIZES[0]
    if page_size not in PAGE_SIZES:
        page_size = PAGE_SIZES[0]
    paginator = Paginator(qs, page_size)
    page_obj = paginator.get_page(request.GET.get("page"))
    data = {
        "items": [transaction_payload(txn) for txn in page_obj.object_list],
        "page": page_obj.number,
        "page_size": page_size,
        "total": paginator.count,
    }
    return api_response(data, "Transactions loaded.")


@require_http_methods(["GET", "PUT", "DELETE"])
@ledger_api
def transaction_detail(request, pk):
    if request.method == "GET":
        return api_response(transaction_payload(get_transaction(request.user, pk)), "Transaction loaded.")

    if request.method == "DELETE":
        delete_transaction(request.user, pk)
        return with_hx_trigger(request, api_response(None, "Transaction deleted."), "transactions")

    payload = read_json(request)
    txn = update_transaction(
        request.user,
        pk,
        account_id=parse_int(payload.get("account_id"), "account_id"),
        **_fields_from_payload(payload),
    )
    return with_hx_trigger(request, api_response(transaction_payload(txn), "Transaction updated."), "transactions")
