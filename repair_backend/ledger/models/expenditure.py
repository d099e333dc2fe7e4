# ledger/models/expenditure.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from ledger.utils import normalize_supplier_name


class Expenditure(models.Model):
    """
    Money owed to a supplier (debit record).

    Rules:
    - amount == paid_amount + remaining_amount, both >= 0
    - recipient keeps the supplier name exactly as supplied;
      supplier_key (trimmed + lowercased) is the lookup/grouping key
    - only the payment allocator mutates paid/remaining
    - deleted only by an admin reset
    """

    CATEGORY_PARTS = "Parts"
    PAYMENT_PENDING = "Pending"
    ITEMS_MANUAL = "Manual"

    recipient = models.CharField(max_length=200)
    supplier_key = models.CharField(max_length=200, db_index=True, editable=False)

    description = models.CharField(max_length=255)
    category = models.CharField(max_length=50, default=CATEGORY_PARTS)
    items = models.CharField(max_length=200, blank=True, default="")
    payment_method = models.CharField(max_length=50, default=PAYMENT_PENDING)

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    remaining_amount = models.DecimalField(max_digits=14, decimal_places=2)

    # Plain id (no FK): collections are reset independently.
    source_transaction_id = models.PositiveBigIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name = "Expenditure"
        verbose_name_plural = "Expenditures"
        indexes = [
            models.Index(
                fields=["supplier_key", "created_at"],
                name="ledger_expe_supplie_8a41c7_idx",
            ),
            models.Index(fields=["created_at"], name="ledger_expe_created_52d0e9_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gte=Decimal("0.00")),
                name="expenditure_amount_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(paid_amount__gte=Decimal("0.00")),
                name="expenditure_paid_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(remaining_amount__gte=Decimal("0.00")),
                name="expenditure_remaining_nonnegative",
            ),
        ]

    def __str__(self):
        return f"Expenditure #{self.id} - {self.recipient} {self.remaining_amount}/{self.amount}"

    @property
    def is_settled(self) -> bool:
        return self.remaining_amount <= Decimal("0.00")

    def clean(self):
        if not self.supplier_key:
            raise ValidationError({"recipient": "recipient is required"})

        for field in ("amount", "paid_amount", "remaining_amount"):
            value = getattr(self, field)
            if value is None:
                raise ValidationError({field: f"{field} is required"})
            if value < Decimal("0.00"):
                raise ValidationError({field: f"{field} cannot be negative"})

        if self.amount != self.paid_amount + self.remaining_amount:
            raise ValidationError(
                "amount must equal paid_amount + remaining_amount "
                f"({self.amount} != {self.paid_amount} + {self.remaining_amount})"
            )

    def save(self, *args, **kwargs):
        self.supplier_key = normalize_supplier_name(self.recipient)
        self.description = (self.description or "").strip()
        self.full_clean()
        return super().save(*args, **kwargs)
