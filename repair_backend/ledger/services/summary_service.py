# PATH: ledger/services/summary_service.py

"""
SUPPLIER SUMMARY (read-only)

Groups expenditures by supplier_key:
- total_expenditure = sum(amount)
- total_paid        = sum(paid_amount)
- total_remaining   = sum(remaining_amount)
- total_due         = total_remaining (alias kept for dashboard consumers)

Never mutates state. Reflects every committed write; no caching.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from ledger.models import Expenditure, SupplierPayment
from ledger.services.store import LedgerStore
from ledger.utils import ZERO, money, normalize_supplier_name


@dataclass
class SupplierSummary:
    supplier_key: str
    total_expenditure: Decimal = ZERO
    total_paid: Decimal = ZERO
    total_remaining: Decimal = ZERO
    transactions: list[Expenditure] = field(default_factory=list)
    last_payment: SupplierPayment | None = None

    @property
    def total_due(self) -> Decimal:
        return self.total_remaining


def get_supplier_summary(
    *, supplier: str | None = None, store: LedgerStore | None = None
) -> dict[str, SupplierSummary]:
    store = store or LedgerStore()

    wanted = normalize_supplier_name(supplier) if supplier else ""

    summaries: dict[str, SupplierSummary] = {}
    for expenditure in store.list_expenditures():
        key = expenditure.supplier_key
        if wanted and key != wanted:
            continue

        summary = summaries.get(key)
        if summary is None:
            summary = summaries[key] = SupplierSummary(supplier_key=key)

        summary.total_expenditure += expenditure.amount
        summary.total_paid += expenditure.paid_amount
        summary.total_remaining += expenditure.remaining_amount
        summary.transactions.append(expenditure)

    last_payments = store.last_payments_by_supplier()
    for key, summary in summaries.items():
        summary.total_expenditure = money(summary.total_expenditure)
        summary.total_paid = money(summary.total_paid)
        summary.total_remaining = money(summary.total_remaining)
        summary.last_payment = last_payments.get(key)

    return summaries
