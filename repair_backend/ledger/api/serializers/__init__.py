# ledger/api/serializers/__init__.py

from ledger.api.serializers.expenditures import (
    ExpenditureCreateSerializer,
    ExpenditureSerializer,
)
from ledger.api.serializers.summary import SupplierSummarySerializer, serialize_summary
from ledger.api.serializers.supplier_payments import (
    SupplierPaymentCreateSerializer,
    SupplierPaymentSerializer,
)
from ledger.api.serializers.transactions import (
    RepairTransactionCreateSerializer,
    RepairTransactionSerializer,
)

__all__ = [
    "ExpenditureSerializer",
    "ExpenditureCreateSerializer",
    "SupplierSummarySerializer",
    "serialize_summary",
    "SupplierPaymentSerializer",
    "SupplierPaymentCreateSerializer",
    "RepairTransactionSerializer",
    "RepairTransactionCreateSerializer",
]
