from django.urls import path

from .views.accounts_views import account_balance_view, account_collection, account_detail
from .views.category_views import category_collection, category_detail
from .views.report_views import dashboard_view, report_summary
from .views.transaction_views import transaction_collection, transaction_detail
from .views.user_views import user_detail, user_list, user_set_role, user_set_status

app_name = "ledger"

urlpatterns = [
    path("accounts/", account_collection, name="account_collection"),
    path("accounts/<int:pk>/", account_detail, name="account_detail"),
    path("accounts/<int:pk>/balance/", account_balance_view, name="account_balance"),
    path("categories/", category_collection, name="category_collection"),
    path("categories/<int:pk>/", category_detail, name="category_detail"),
    path("transactions/", transaction_collection, name="transaction_collection"),
    path("transactions/<int:pk>/", transaction_detail, name="transaction_detail"),
    path("report/summary/", report_summary, name="report_summary"),
    path("dashboard/", dashboard_view, name="dashboard"),
    path("users/", user_list, name="user_list"),
    path("users/<int:pk>/", user_detail, name="user_detail"),
    path("users/<int:pk>/role/", user_set_role, name="user_set_role"),
    path("users/<int:pk>/status/", user_set_status, name="user_set_status"),
]
