# ledger/tests/test_summary.py

from decimal import Decimal

from django.test import TestCase

from ledger.services.payment_service import record_supplier_payment
from ledger.services.store import LedgerStore
from ledger.services.summary_service import get_supplier_summary


class SupplierSummaryTests(TestCase):
    """
    GUARANTEES:
    - Grouping by normalized supplier identity
    - total_due == total_remaining
    - Read-only and repeatable
    """

    def setUp(self):
        self.store = LedgerStore()
        for name, amount in (("Hub", "100.00"), ("hub", "50.00"), (" HUB ", "25.00")):
            self.store.add_expenditure(
                recipient=name, description="Parts", amount=Decimal(amount)
            )
        self.store.add_expenditure(
            recipient="Spares Co", description="Parts", amount=Decimal("10.00")
        )

    def test_case_variants_group_into_one_entry(self):
        summaries = get_supplier_summary()

        self.assertEqual(set(summaries), {"hub", "spares co"})
        hub = summaries["hub"]
        self.assertEqual(hub.total_expenditure, Decimal("175.00"))
        self.assertEqual(hub.total_paid, Decimal("0.00"))
        self.assertEqual(hub.total_remaining, Decimal("175.00"))
        self.assertEqual(hub.total_due, hub.total_remaining)
        self.assertEqual(len(hub.transactions), 3)
        self.assertIsNone(hub.last_payment)

    def test_totals_follow_payments(self):
        record_supplier_payment(supplier="Hub", amount="120.00", payment_method="Cash")
        last = record_supplier_payment(
            supplier="hub", amount="5.00", payment_method="Mpesa"
        ).payment

        hub = get_supplier_summary()["hub"]
        self.assertEqual(hub.total_paid, Decimal("125.00"))
        self.assertEqual(hub.total_remaining, Decimal("50.00"))
        self.assertEqual(hub.total_expenditure, hub.total_paid + hub.total_remaining)
        self.assertEqual(hub.last_payment.id, last.id)

    def test_supplier_filter(self):
        summaries = get_supplier_summary(supplier="  SPARES co")
        self.assertEqual(list(summaries), ["spares co"])

    def test_repeated_reads_are_identical(self):
        first = get_supplier_summary()
        second = get_supplier_summary()

        self.assertEqual(first.keys(), second.keys())
        for key in first:
            a, b = first[key], second[key]
            self.assertEqual(
                (a.total_expenditure, a.total_paid, a.total_remaining),
                (b.total_expenditure, b.total_paid, b.total_remaining),
            )
            self.assertEqual(
                [e.id for e in a.transactions], [e.id for e in b.transactions]
            )
