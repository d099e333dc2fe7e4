# ledger/api/views/__init__.py

from ledger.api.views.events import LedgerEventStreamView
from ledger.api.views.expenditures import ExpenditureListCreateView, SupplierSummaryView
from ledger.api.views.resets import ClearCollectionView
from ledger.api.views.supplier_payments import SupplierPaymentListCreateView
from ledger.api.views.transactions import (
    RepairTransactionDetailView,
    RepairTransactionListCreateView,
)

__all__ = [
    "RepairTransactionListCreateView",
    "RepairTransactionDetailView",
    "ExpenditureListCreateView",
    "SupplierSummaryView",
    "SupplierPaymentListCreateView",
    "ClearCollectionView",
    "LedgerEventStreamView",
]
