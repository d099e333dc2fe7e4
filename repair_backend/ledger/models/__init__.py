from .expenditure import Expenditure
from .supplier_payment import SupplierPayment
from .transaction import RepairTransaction

__all__ = [
    "Expenditure",
    "RepairTransaction",
    "SupplierPayment",
]
