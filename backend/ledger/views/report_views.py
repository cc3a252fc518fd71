from django.utils import timezone
from django.views.decorators.http import require_GET

from ledger.models import Category
from ledger.services.reports import dashboard, summary
from ledger.views.accounts_views import account_payload
from ledger.views.transaction_views import filters_from_query
from ledger.views.utils import api_response, ledger_api, parse_int, parse_month


def _shares_payload(shares, names):
    return [
        {
            "category_id": share.category_id,
            "name": names.get(share.category_id, ""),
            "amount": share.amount,
            "percentage": share.percentage,
        }
        for share in shares
    ]


@require_GET
@ledger_api
def report_summary(request):
    filters = filters_from_query(request.GET)
    totals = summary(request.user, **filters)
    data = {
        "total_income": totals.total_income,
        "total_expense": totals.total_expense,
        "net": totals.net,
        "filters": {
            "account_id": filters["account_id"],
            "category_id": filters["category_id"],
            "date_from": filters["date_from"],
            "date_to": filters["date_to"],
            "type": filters["transaction_type"],
        },
    }
    return api_response(data, "Summary computed.")


@require_GET
@ledger_api
def dashboard_view(request):
    year, month = parse_month(request.GET.get("month"))
    result = dashboard(
        request.user,
        account_id=parse_int(request.GET.get("account_id"), "account_id"),
        year=year,
        month=month,
        today=timezone.localdate(),
    )
    names = dict(Category.objects.filter(user=request.user).values_list("id", "name"))
    stats = result.month
    data = {
        "account": account_payload(result.account) if result.account else None,
        "balance": result.balance,
        "month": f"{stats.year:04d}-{stats.month:02d}",
        "income": stats.income,
        "expense": stats.expense,
        "net": stats.net,
        "transaction_count": stats.count,
        "days_elapsed": stats.days_elapsed,
        "average_daily_expense": stats.average_daily_expense,
        "savings_rate": stats.savings_rate,
        "expense_by_category": _shares_payload(result.expense_by_category, names),
        "income_by_category": _shares_payload(result.income_by_category, names),
    }
    return api_response(data, "Dashboard computed.")
