from django.contrib import admin

from .models import Account, Category, Transaction


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "type", "currency", "initial_balance", "is_active", "created_at")
    list_filter = ("is_active", "currency")
    search_fields = ("name", "user__username")


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "user", "parent", "is_active", "is_default")
    list_filter = ("type", "is_active", "is_default")
    search_fields = ("name", "user__username")
    # Type is fixed once created.
    readonly_fields = ("type",)

    def get_readonly_fields(self, request, obj=None):
        return self.readonly_fields if obj else ()


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("trx_date", "type", "account", "amount", "category", "transfer_account", "user")
    list_filter = ("type", "account")
    search_fields = ("note", "user__username")
    autocomplete_fields = ("account", "category", "transfer_account")
