# PATH: ledger/services/store.py

"""
LEDGER STORE

Repository over the three ledger record sets:
- transactions       (RepairTransaction)
- expenditures       (Expenditure, debits)
- supplierPayments   (SupplierPayment, credits)

Services receive a store instead of touching the ORM directly, so the
single-writer boundary lives in the services and the persistence details
(ordering, row locks, table wipes) live here.

Ordering rule:
- Outstanding expenditures are returned oldest first (created_at, then id).
  The FIFO allocation policy depends on this, not on insertion order.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import connection

from ledger.models import Expenditure, RepairTransaction, SupplierPayment
from ledger.utils import ZERO

COLLECTION_TRANSACTIONS = "transactions"
COLLECTION_EXPENDITURES = "expenditures"
COLLECTION_SUPPLIER_PAYMENTS = "supplierPayments"

COLLECTIONS = {
    COLLECTION_TRANSACTIONS: RepairTransaction,
    COLLECTION_EXPENDITURES: Expenditure,
    COLLECTION_SUPPLIER_PAYMENTS: SupplierPayment,
}


def _run_sql(sql: str, params=None):
    with connection.cursor() as cursor:
        cursor.execute(sql, params)


def _wipe_table(table: str) -> None:
    """
    DB-vendor-safe wipe that also restarts the id sequence at 1.

    - Postgres: TRUNCATE ... RESTART IDENTITY
    - SQLite: DELETE + reset sqlite_sequence
    - MySQL: DELETE + AUTO_INCREMENT = 1
    """
    vendor = connection.vendor
    quoted = connection.ops.quote_name(table)

    if vendor == "postgresql":
        _run_sql(f"TRUNCATE TABLE {quoted} RESTART IDENTITY;")
        return

    if vendor == "sqlite":
        _run_sql(f"DELETE FROM {quoted};")
        _run_sql("DELETE FROM sqlite_sequence WHERE name = %s;", [table])
        return

    if vendor == "mysql":
        _run_sql(f"DELETE FROM {quoted};")
        _run_sql(f"ALTER TABLE {quoted} AUTO_INCREMENT = 1;")
        return

    _run_sql(f"DELETE FROM {quoted};")


class LedgerStore:
    # ------------------------------
    # Transactions
    # ------------------------------
    def add_transaction(self, **fields) -> RepairTransaction:
        return RepairTransaction.objects.create(**fields)

    # ------------------------------
    # Expenditures
    # ------------------------------
    def add_expenditure(
        self,
        *,
        recipient: str,
        description: str,
        amount: Decimal,
        paid_amount: Decimal = ZERO,
        items: str = "",
        category: str = Expenditure.CATEGORY_PARTS,
        payment_method: str = Expenditure.PAYMENT_PENDING,
        source_transaction_id: int | None = None,
    ) -> Expenditure:
        return Expenditure.objects.create(
            recipient=recipient,
            description=description,
            amount=amount,
            paid_amount=paid_amount,
            remaining_amount=amount - paid_amount,
            items=items,
            category=category,
            payment_method=payment_method,
            source_transaction_id=source_transaction_id,
        )

    def list_expenditures(self) -> list[Expenditure]:
        return list(Expenditure.objects.order_by("created_at", "id"))

    def outstanding_expenditures(
        self, supplier_key: str, *, for_update: bool = False
    ) -> list[Expenditure]:
        qs = Expenditure.objects.filter(
            supplier_key=supplier_key,
            remaining_amount__gt=ZERO,
        )
        if for_update:
            qs = qs.select_for_update()
        return list(qs.order_by("created_at", "id"))

    def save_expenditure(self, expenditure: Expenditure) -> None:
        expenditure.save(update_fields=["paid_amount", "remaining_amount"])

    # ------------------------------
    # Supplier payments
    # ------------------------------
    def add_payment(self, **fields) -> SupplierPayment:
        return SupplierPayment.objects.create(**fields)

    def last_payments_by_supplier(self) -> dict[str, SupplierPayment]:
        latest: dict[str, SupplierPayment] = {}
        for payment in SupplierPayment.objects.order_by("created_at", "id"):
            latest[payment.supplier_key] = payment
        return latest

    # ------------------------------
    # Reset
    # ------------------------------
    def clear(self, collection: str) -> int:
        model = COLLECTIONS[collection]
        count = model.objects.count()
        _wipe_table(model._meta.db_table)
        return count
