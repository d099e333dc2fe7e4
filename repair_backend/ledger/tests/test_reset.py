# ledger/tests/test_reset.py

from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from ledger.models import Expenditure, RepairTransaction, SupplierPayment
from ledger.services.exceptions import LedgerValidationError
from ledger.services.payment_service import record_supplier_payment
from ledger.services.reset_service import (
    clear_collection,
    clear_expenditures,
    clear_supplier_payments,
    clear_transactions,
)
from ledger.services.transaction_service import post_transaction

TXN = {
    "customer_name": "Jane Doe",
    "mobile_number": "0712345678",
    "device_model": "Tecno Spark",
    "repair_type": "Charging port",
    "repair_cost": Decimal("800.00"),
    "payment_method": "Cash",
    "external_purchases": [{"supplier": "Hub", "item": "Port", "cost": 300}],
}


class AdminResetTests(TestCase):
    """
    GUARANTEES:
    - Each reset empties exactly one collection
    - Ids restart at 1 after a reset
    """

    def setUp(self):
        post_transaction(data=dict(TXN))
        record_supplier_payment(supplier="Hub", amount="100.00", payment_method="Cash")

    def _counts(self):
        return (
            RepairTransaction.objects.count(),
            Expenditure.objects.count(),
            SupplierPayment.objects.count(),
        )

    def test_clearing_expenditures_keeps_other_collections(self):
        removed = clear_expenditures()

        self.assertEqual(removed, 1)
        self.assertEqual(self._counts(), (1, 0, 1))

    def test_clearing_transactions_keeps_expenditures(self):
        clear_transactions()
        self.assertEqual(self._counts(), (0, 1, 1))

    def test_clearing_payments_keeps_expenditures(self):
        clear_supplier_payments()
        self.assertEqual(self._counts(), (1, 1, 0))
        self.assertEqual(
            Expenditure.objects.get().remaining_amount, Decimal("200.00")
        )

    def test_ids_restart_after_reset(self):
        post_transaction(data=dict(TXN))
        clear_transactions()

        posted = post_transaction(data=dict(TXN, external_purchases=None))
        self.assertEqual(posted.transaction.id, 1)

    def test_unknown_collection_rejected(self):
        with self.assertRaises(LedgerValidationError):
            clear_collection("customers")
        self.assertEqual(self._counts(), (1, 1, 1))

    def test_management_command_requires_flag(self):
        out = StringIO()
        call_command("reset_ledger", stdout=out)
        self.assertIn("Refusing", out.getvalue())
        self.assertEqual(self._counts(), (1, 1, 1))

    def test_management_command_clears_selected(self):
        out = StringIO()
        call_command(
            "reset_ledger",
            "--i-am-sure",
            "--collection",
            "supplierPayments",
            stdout=out,
        )
        self.assertEqual(self._counts(), (1, 1, 0))

    def test_seed_command_posts_demo_data(self):
        clear_transactions()
        clear_expenditures()
        clear_supplier_payments()

        call_command("seed_demo_ledger", "--with-payment", stdout=StringIO())

        self.assertEqual(self._counts(), (1, 2, 1))
        hub = Expenditure.objects.get(supplier_key="hub")
        self.assertEqual(hub.remaining_amount, Decimal("700.00"))
