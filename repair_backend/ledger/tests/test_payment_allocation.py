# ledger/tests/test_payment_allocation.py

import threading
import time
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from ledger.models import Expenditure, SupplierPayment
from ledger.services.exceptions import LedgerInternalError, LedgerValidationError
from ledger.services.payment_service import (
    LOCK_STRIPES,
    _supplier_lock,
    _supplier_locks,
    record_supplier_payment,
)
from ledger.services.store import LedgerStore


class PaymentAllocationTests(TestCase):
    """
    Supplier payment allocator.

    GUARANTEES:
    - Oldest debt is reduced first (created_at, then id)
    - amount == paid_amount + remaining_amount on every expenditure
    - Payment row always carries the full requested amount
    """

    def setUp(self):
        self.store = LedgerStore()

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _debt(self, supplier, amount, *, minutes_ago=0):
        exp = self.store.add_expenditure(
            recipient=supplier,
            description=f"Parts from {supplier}",
            amount=Decimal(amount),
            items="Screen",
        )
        created_at = timezone.now() - timedelta(minutes=minutes_ago)
        Expenditure.objects.filter(pk=exp.pk).update(created_at=created_at)
        exp.refresh_from_db()
        return exp

    def _pay(self, supplier, amount, method="Cash"):
        return record_supplier_payment(
            supplier=supplier,
            amount=Decimal(amount),
            payment_method=method,
            store=self.store,
        )

    def _assert_conserved(self):
        for exp in Expenditure.objects.all():
            self.assertEqual(exp.amount, exp.paid_amount + exp.remaining_amount)
            self.assertGreaterEqual(exp.paid_amount, Decimal("0.00"))
            self.assertGreaterEqual(exp.remaining_amount, Decimal("0.00"))

    # --------------------------------------------------
    # FIFO
    # --------------------------------------------------

    def test_small_payment_reduces_only_oldest_debt(self):
        t1 = self._debt("Hub", "300.00", minutes_ago=30)
        t2 = self._debt("Hub", "200.00", minutes_ago=20)
        t3 = self._debt("Hub", "100.00", minutes_ago=10)

        self._pay("Hub", "120.00")

        for exp in (t1, t2, t3):
            exp.refresh_from_db()
        self.assertEqual(t1.remaining_amount, Decimal("180.00"))
        self.assertEqual(t2.remaining_amount, Decimal("200.00"))
        self.assertEqual(t3.remaining_amount, Decimal("100.00"))
        self._assert_conserved()

    def test_payment_clears_oldest_and_partially_covers_next(self):
        t1 = self._debt("Hub", "300.00", minutes_ago=30)
        t2 = self._debt("Hub", "200.00", minutes_ago=20)
        t3 = self._debt("Hub", "100.00", minutes_ago=10)

        result = self._pay("Hub", "350.00")

        for exp in (t1, t2, t3):
            exp.refresh_from_db()
        self.assertEqual(t1.remaining_amount, Decimal("0.00"))
        self.assertEqual(t1.paid_amount, Decimal("300.00"))
        self.assertEqual(t2.remaining_amount, Decimal("150.00"))
        self.assertEqual(t3.remaining_amount, Decimal("100.00"))
        self.assertEqual(
            [(a.expenditure_id, a.applied) for a in result.allocations],
            [(t1.id, Decimal("300.00")), (t2.id, Decimal("50.00"))],
        )
        self._assert_conserved()

    def test_order_follows_created_at_not_insertion(self):
        newer = self._debt("Hub", "100.00", minutes_ago=5)
        older = self._debt("Hub", "100.00", minutes_ago=50)

        self._pay("Hub", "60.00")

        newer.refresh_from_db()
        older.refresh_from_db()
        self.assertEqual(older.remaining_amount, Decimal("40.00"))
        self.assertEqual(newer.remaining_amount, Decimal("100.00"))

    def test_supplier_identity_ignores_case_and_spaces(self):
        exp = self._debt("Hub", "500.00")

        result = self._pay("  HUB ", "200.00")

        exp.refresh_from_db()
        self.assertEqual(exp.remaining_amount, Decimal("300.00"))
        self.assertIsNone(result.synthesized)
        self.assertEqual(result.payment.supplier_key, "hub")

    def test_other_suppliers_untouched(self):
        hub = self._debt("Hub", "100.00")
        other = self._debt("Spares Co", "100.00")

        self._pay("Hub", "100.00")

        other.refresh_from_db()
        hub.refresh_from_db()
        self.assertEqual(hub.remaining_amount, Decimal("0.00"))
        self.assertEqual(other.remaining_amount, Decimal("100.00"))

    # --------------------------------------------------
    # Overpayment / no debt
    # --------------------------------------------------

    def test_overpayment_zeroes_debt_and_records_full_amount(self):
        t1 = self._debt("Hub", "100.00", minutes_ago=10)
        t2 = self._debt("Hub", "50.00", minutes_ago=5)

        result = self._pay("Hub", "200.00")

        t1.refresh_from_db()
        t2.refresh_from_db()
        self.assertEqual(t1.remaining_amount, Decimal("0.00"))
        self.assertEqual(t2.remaining_amount, Decimal("0.00"))

        payment = result.payment
        self.assertEqual(payment.amount, Decimal("200.00"))
        self.assertEqual(payment.allocated_amount, Decimal("150.00"))
        self.assertEqual(payment.unallocated_amount, Decimal("50.00"))
        self.assertEqual(result.unallocated, Decimal("50.00"))

        # Payment history exceeds what the ledger shows as paid.
        paid_total = sum(e.paid_amount for e in Expenditure.objects.all())
        history_total = sum(p.amount for p in SupplierPayment.objects.all())
        self.assertEqual(history_total - paid_total, Decimal("50.00"))
        self._assert_conserved()

    def test_payment_without_debt_creates_settled_expenditure(self):
        result = self._pay("New Supplier", "75.00", method="Mpesa")

        self.assertEqual(Expenditure.objects.count(), 1)
        self.assertEqual(SupplierPayment.objects.count(), 1)

        exp = Expenditure.objects.get()
        self.assertEqual(exp.id, result.synthesized.id)
        self.assertEqual(exp.recipient, "New Supplier")
        self.assertEqual(exp.amount, Decimal("75.00"))
        self.assertEqual(exp.paid_amount, Decimal("75.00"))
        self.assertEqual(exp.remaining_amount, Decimal("0.00"))
        self.assertEqual(exp.items, Expenditure.ITEMS_MANUAL)
        self.assertEqual(exp.payment_method, "Mpesa")
        self.assertEqual(result.unallocated, Decimal("0.00"))

    def test_payment_after_debt_settled_synthesizes_again(self):
        self._debt("Hub", "100.00")
        self._pay("Hub", "100.00")

        result = self._pay("Hub", "40.00")

        self.assertIsNotNone(result.synthesized)
        self.assertEqual(Expenditure.objects.count(), 2)
        self._assert_conserved()

    def test_default_description(self):
        result = self._pay("Hub", "10.00")
        self.assertEqual(result.payment.description, "Payment to Hub")

    # --------------------------------------------------
    # Validation / failures
    # --------------------------------------------------

    def test_rejects_blank_supplier(self):
        with self.assertRaises(LedgerValidationError):
            self._pay("   ", "10.00")
        self.assertEqual(SupplierPayment.objects.count(), 0)
        self.assertEqual(Expenditure.objects.count(), 0)

    def test_rejects_non_positive_amount(self):
        self._debt("Hub", "100.00")
        for amount in ("0", "-5"):
            with self.assertRaises(LedgerValidationError):
                self._pay("Hub", amount)
        with self.assertRaises(LedgerValidationError):
            record_supplier_payment(supplier="Hub", amount="abc", payment_method="Cash")
        self.assertEqual(SupplierPayment.objects.count(), 0)

    def test_rejects_amounts_the_ledger_cannot_hold(self):
        exp = self._debt("Hub", "100.00")

        for amount in ("1e30", "1000000000000.00", "Infinity"):
            with self.subTest(amount=amount):
                with self.assertRaises(LedgerValidationError):
                    record_supplier_payment(
                        supplier="Hub", amount=amount, payment_method="Cash"
                    )

        with self.assertRaises(LedgerValidationError):
            self._pay("H" * 201, "10.00")

        exp.refresh_from_db()
        self.assertEqual(exp.remaining_amount, Decimal("100.00"))
        self.assertEqual(SupplierPayment.objects.count(), 0)

    def test_supplier_locks_come_from_a_fixed_pool(self):
        self.assertIs(_supplier_lock("hub"), _supplier_lock("hub"))
        for n in range(1000):
            self.assertIn(_supplier_lock(f"supplier-{n}"), _supplier_locks)
        self.assertEqual(len(_supplier_locks), LOCK_STRIPES)

    def test_failure_rolls_back_allocation(self):
        exp = self._debt("Hub", "100.00")

        with mock.patch.object(
            LedgerStore, "add_payment", side_effect=DatabaseError("disk full")
        ):
            with self.assertRaises(LedgerInternalError):
                self._pay("Hub", "60.00")

        exp.refresh_from_db()
        self.assertEqual(exp.remaining_amount, Decimal("100.00"))
        self.assertEqual(SupplierPayment.objects.count(), 0)


class ConcurrentPaymentTests(TransactionTestCase):
    """
    Two payments to one supplier at the same moment.

    GUARANTEES:
    - Neither payment reads a remaining_amount the other already reduced
    - paid_amount ends up as the sum of both payments
    """

    def _pay_in_thread(self, barrier, errors, amount):
        try:
            barrier.wait(timeout=5)
            record_supplier_payment(supplier="Hub", amount=amount, payment_method="Cash")
        except Exception as exc:
            errors.append(exc)
        finally:
            connection.close()

    def test_simultaneous_payments_both_land(self):
        LedgerStore().add_expenditure(
            recipient="Hub", description="Screens", amount=Decimal("1000.00")
        )

        read_outstanding = LedgerStore.outstanding_expenditures

        def slow_read(store, *args, **kwargs):
            rows = read_outstanding(store, *args, **kwargs)
            time.sleep(0.05)
            return rows

        barrier = threading.Barrier(2)
        errors = []
        with mock.patch.object(LedgerStore, "outstanding_expenditures", slow_read):
            threads = [
                threading.Thread(target=self._pay_in_thread, args=(barrier, errors, amount))
                for amount in ("300.00", "200.00")
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(timeout=10)

        self.assertEqual(errors, [])
        self.assertEqual(SupplierPayment.objects.count(), 2)

        exp = Expenditure.objects.get()
        self.assertEqual(exp.paid_amount, Decimal("500.00"))
        self.assertEqual(exp.remaining_amount, Decimal("500.00"))
        self.assertEqual(exp.amount, exp.paid_amount + exp.remaining_amount)
