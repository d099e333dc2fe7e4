# ledger/management/commands/seed_demo_ledger.py

"""
Seeds a small demo ledger through the same services the API uses:
- one repair transaction with two external purchases (Hub, Spares Co)
- optionally one partial payment to Hub
"""

from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from ledger.services.payment_service import record_supplier_payment
from ledger.services.summary_service import get_supplier_summary
from ledger.services.transaction_service import post_transaction

DEMO_TRANSACTION = {
    "customer_name": "Demo Customer",
    "mobile_number": "0712345678",
    "device_model": "Galaxy A52",
    "repair_type": "Screen replacement",
    "repair_cost": Decimal("2500.00"),
    "payment_method": "Cash",
    "amount_given": Decimal("3000.00"),
    "change_returned": Decimal("500.00"),
    "remarks": "Demo data",
    "external_purchases": [
        {"supplier": "Hub", "item": "Screen", "cost": 1200},
        {"supplier": "Spares Co", "item": "Adhesive", "cost": "150"},
    ],
}


class Command(BaseCommand):
    help = "Seed demo repair transactions and supplier debts."

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-payment",
            action="store_true",
            help="Also record a 500.00 cash payment to Hub.",
        )

    def handle(self, *args, **options):
        posted = post_transaction(data=dict(DEMO_TRANSACTION), performed_by="seed")
        self.stdout.write(
            f"Transaction #{posted.transaction.id}: "
            f"{len(posted.expenditures)} expenditure(s) derived"
        )

        if options.get("with_payment"):
            result = record_supplier_payment(
                supplier="Hub",
                amount=Decimal("500.00"),
                payment_method="Cash",
                performed_by="seed",
            )
            self.stdout.write(f"Payment #{result.payment.id}: 500.00 to Hub")

        for key, summary in get_supplier_summary().items():
            self.stdout.write(
                f"{key}: expenditure={summary.total_expenditure} "
                f"paid={summary.total_paid} due={summary.total_due}"
            )

        self.stdout.write(self.style.SUCCESS("Demo ledger seeded."))
