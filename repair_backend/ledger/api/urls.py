# ledger/api/urls.py

from django.urls import path

from ledger.api.views import (
    ClearCollectionView,
    ExpenditureListCreateView,
    LedgerEventStreamView,
    RepairTransactionDetailView,
    RepairTransactionListCreateView,
    SupplierPaymentListCreateView,
    SupplierSummaryView,
)
from ledger.services.store import (
    COLLECTION_EXPENDITURES,
    COLLECTION_SUPPLIER_PAYMENTS,
    COLLECTION_TRANSACTIONS,
)

urlpatterns = [
    # Transactions
    path("transactions/", RepairTransactionListCreateView.as_view(), name="transactions"),
    path(
        "transactions/<int:pk>/",
        RepairTransactionDetailView.as_view(),
        name="transaction-detail",
    ),
    path(
        "transactions/clear/",
        ClearCollectionView.as_view(collection=COLLECTION_TRANSACTIONS),
        name="transactions-clear",
    ),
    # Expenditures
    path("expenditures/", ExpenditureListCreateView.as_view(), name="expenditures"),
    path(
        "expenditures/supplier-summary/",
        SupplierSummaryView.as_view(),
        name="supplier-summary",
    ),
    path(
        "expenditures/clear/",
        ClearCollectionView.as_view(collection=COLLECTION_EXPENDITURES),
        name="expenditures-clear",
    ),
    # Supplier payments
    path(
        "supplier-payments/",
        SupplierPaymentListCreateView.as_view(),
        name="supplier-payments",
    ),
    path(
        "supplier-payments/clear/",
        ClearCollectionView.as_view(collection=COLLECTION_SUPPLIER_PAYMENTS),
        name="supplier-payments-clear",
    ),
    # Live updates
    path("events/", LedgerEventStreamView.as_view(), name="ledger-events"),
]
