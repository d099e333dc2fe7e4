# ledger/models/transaction.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class RepairTransaction(models.Model):
    """
    Repair job posted at the counter.

    Rule:
    - Created once, immutable afterwards
    - external_purchases is stored exactly as the client sent it; the
      expenditure deriver reads it leniently (it may be malformed)
    """

    STATUS_COMPLETED = "Completed"

    customer_name = models.CharField(max_length=200)
    mobile_number = models.CharField(max_length=20)
    device_model = models.CharField(max_length=200)
    repair_type = models.CharField(max_length=200)

    repair_cost = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    payment_method = models.CharField(max_length=50)
    amount_given = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    change_returned = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(max_length=30, default=STATUS_COMPLETED)
    remarks = models.TextField(blank=True, default="")

    external_purchases = models.JSONField(null=True, blank=True)

    created_by = models.CharField(max_length=150, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = "Repair transaction"
        verbose_name_plural = "Repair transactions"
        indexes = [
            models.Index(fields=["created_at"], name="ledger_repa_created_6e1f0a_idx"),
            models.Index(fields=["mobile_number"], name="ledger_repa_mobile__3b9c2d_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(repair_cost__gte=Decimal("0.00")),
                name="repair_transaction_cost_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(amount_given__gte=Decimal("0.00")),
                name="repair_transaction_amount_given_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(change_returned__gte=Decimal("0.00")),
                name="repair_transaction_change_nonnegative",
            ),
        ]

    def __str__(self):
        return f"Transaction #{self.id} - {self.customer_name} ({self.device_model})"

    def clean(self):
        errors = {}
        for field in ("customer_name", "device_model", "repair_type", "payment_method"):
            if not (getattr(self, field) or "").strip():
                errors[field] = f"{field} is required"

        if len((self.mobile_number or "").strip()) < 10:
            errors["mobile_number"] = "mobile_number must have at least 10 characters"

        for field in ("repair_cost", "amount_given", "change_returned"):
            value = getattr(self, field)
            if value is not None and value < Decimal("0.00"):
                errors[field] = f"{field} cannot be negative"

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        if self.pk and type(self).objects.filter(pk=self.pk).exists():
            raise ValidationError("Repair transactions are immutable once posted")

        for field in ("customer_name", "mobile_number", "device_model", "repair_type"):
            setattr(self, field, (getattr(self, field) or "").strip())
        self.remarks = (self.remarks or "").strip()

        self.full_clean()
        return super().save(*args, **kwargs)
