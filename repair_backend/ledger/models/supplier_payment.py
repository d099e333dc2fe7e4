# ledger/models/supplier_payment.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from ledger.utils import normalize_supplier_name


class SupplierPayment(models.Model):
    """
    Money paid toward a supplier's balance (credit record).

    Design:
    - amount is the NOMINAL amount the caller asked to pay, recorded in full
      even when only part of it could be applied to outstanding debt
    - allocated_amount / unallocated_amount record the split for audit
    - append-only: immutable once created, deleted only by an admin reset
    """

    supplier = models.CharField(max_length=200)
    supplier_key = models.CharField(max_length=200, db_index=True, editable=False)

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    payment_method = models.CharField(max_length=50)
    description = models.CharField(max_length=255, blank=True, default="")

    allocated_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    unallocated_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_by = models.CharField(max_length=150, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = "Supplier payment"
        verbose_name_plural = "Supplier payments"
        indexes = [
            models.Index(
                fields=["supplier_key", "created_at"],
                name="ledger_supp_supplie_1f7b3e_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=Decimal("0.00")),
                name="supplier_payment_amount_gt_zero",
            ),
        ]

    def __str__(self):
        return f"{self.supplier} - {self.amount} ({self.payment_method})"

    def clean(self):
        if not self.supplier_key:
            raise ValidationError({"supplier": "supplier is required"})

        if not (self.payment_method or "").strip():
            raise ValidationError({"payment_method": "payment_method is required"})

        if self.amount is None or self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "amount must be > 0"})

    def save(self, *args, **kwargs):
        if self.pk and type(self).objects.filter(pk=self.pk).exists():
            raise ValidationError("Supplier payments are immutable once recorded")

        self.supplier_key = normalize_supplier_name(self.supplier)
        self.payment_method = (self.payment_method or "").strip()
        self.description = (self.description or "").strip()
        self.full_clean()
        return super().save(*args, **kwargs)
