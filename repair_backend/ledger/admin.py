# ledger/admin.py

"""
LEDGER ADMIN (read-only)

Ledger rows are created by the services only:
- transactions and payments are immutable
- expenditure balances change only through the payment allocator
Admin is for inspection; resets go through the clear endpoints or
`manage.py reset_ledger`.
"""

from django.contrib import admin

from ledger.models import Expenditure, RepairTransaction, SupplierPayment


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(RepairTransaction)
class RepairTransactionAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "customer_name",
        "mobile_number",
        "device_model",
        "repair_type",
        "repair_cost",
        "payment_method",
        "created_at",
    )
    search_fields = ("customer_name", "mobile_number", "device_model")
    ordering = ("-created_at",)


@admin.register(Expenditure)
class ExpenditureAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "recipient",
        "items",
        "amount",
        "paid_amount",
        "remaining_amount",
        "source_transaction_id",
        "created_at",
    )
    list_filter = ("category", "payment_method")
    search_fields = ("recipient", "supplier_key", "description")
    ordering = ("-created_at",)


@admin.register(SupplierPayment)
class SupplierPaymentAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "supplier",
        "amount",
        "allocated_amount",
        "unallocated_amount",
        "payment_method",
        "created_by",
        "created_at",
    )
    list_filter = ("payment_method",)
    search_fields = ("supplier", "supplier_key")
    ordering = ("-created_at",)
