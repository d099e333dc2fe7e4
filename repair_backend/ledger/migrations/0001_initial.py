"""
======================================================
PATH: ledger/migrations/0001_initial.py
======================================================
MIGRATION: CREATE RepairTransaction, Expenditure, SupplierPayment
"""

from __future__ import annotations

from decimal import Decimal

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RepairTransaction",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("customer_name", models.CharField(max_length=200)),
                ("mobile_number", models.CharField(max_length=20)),
                ("device_model", models.CharField(max_length=200)),
                ("repair_type", models.CharField(max_length=200)),
                (
                    "repair_cost",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                ("payment_method", models.CharField(max_length=50)),
                (
                    "amount_given",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                (
                    "change_returned",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                ("status", models.CharField(default="Completed", max_length=30)),
                ("remarks", models.TextField(blank=True, default="")),
                ("external_purchases", models.JSONField(blank=True, null=True)),
                ("created_by", models.CharField(blank=True, default="", max_length=150)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
            ],
            options={
                "verbose_name": "Repair transaction",
                "verbose_name_plural": "Repair transactions",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["created_at"], name="ledger_repa_created_6e1f0a_idx"
                    ),
                    models.Index(
                        fields=["mobile_number"], name="ledger_repa_mobile__3b9c2d_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(repair_cost__gte=Decimal("0.00")),
                        name="repair_transaction_cost_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(amount_given__gte=Decimal("0.00")),
                        name="repair_transaction_amount_given_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(change_returned__gte=Decimal("0.00")),
                        name="repair_transaction_change_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Expenditure",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("recipient", models.CharField(max_length=200)),
                (
                    "supplier_key",
                    models.CharField(db_index=True, editable=False, max_length=200),
                ),
                ("description", models.CharField(max_length=255)),
                ("category", models.CharField(default="Parts", max_length=50)),
                ("items", models.CharField(blank=True, default="", max_length=200)),
                ("payment_method", models.CharField(default="Pending", max_length=50)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "paid_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                (
                    "remaining_amount",
                    models.DecimalField(decimal_places=2, max_digits=14),
                ),
                (
                    "source_transaction_id",
                    models.PositiveBigIntegerField(blank=True, null=True),
                ),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
            ],
            options={
                "verbose_name": "Expenditure",
                "verbose_name_plural": "Expenditures",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["supplier_key", "created_at"],
                        name="ledger_expe_supplie_8a41c7_idx",
                    ),
                    models.Index(
                        fields=["created_at"], name="ledger_expe_created_52d0e9_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gte=Decimal("0.00")),
                        name="expenditure_amount_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(paid_amount__gte=Decimal("0.00")),
                        name="expenditure_paid_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(remaining_amount__gte=Decimal("0.00")),
                        name="expenditure_remaining_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SupplierPayment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("supplier", models.CharField(max_length=200)),
                (
                    "supplier_key",
                    models.CharField(db_index=True, editable=False, max_length=200),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("payment_method", models.CharField(max_length=50)),
                (
                    "description",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "allocated_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                (
                    "unallocated_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                ("created_by", models.CharField(blank=True, default="", max_length=150)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
            ],
            options={
                "verbose_name": "Supplier payment",
                "verbose_name_plural": "Supplier payments",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["supplier_key", "created_at"],
                        name="ledger_supp_supplie_1f7b3e_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=Decimal("0.00")),
                        name="supplier_payment_amount_gt_zero",
                    ),
                ],
            },
        ),
    ]
