# PATH: ledger/services/payment_service.py

"""
SUPPLIER PAYMENT ALLOCATOR

Core algorithm (FIFO debt reduction):
1) Normalize supplier -> supplier_key
2) Lock outstanding expenditures for the key, oldest first (created_at, id)
3) None outstanding -> create one synthetic debit for the full amount
4) Walk the candidates applying min(remaining, left_to_pay) to each
5) Whatever is left after the walk is settled by _settle_overpayment
6) Record the SupplierPayment with the full nominal amount

Concurrency:
- Steps 2-6 run in one transaction.atomic block, under a per-supplier
  in-process lock and select_for_update row locks (where supported)
- Two payments to the same supplier never read the same stale remaining_amount

Overpayment:
- The excess is NOT credited to any expenditure. The payment row keeps the
  full amount and records the split in allocated_amount / unallocated_amount,
  so payment history may exceed the ledger's paid total for that supplier.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from ledger.events import EVENT_SUPPLIER_PAYMENT_CREATED, get_broadcaster, payment_payload
from ledger.models import Expenditure, SupplierPayment
from ledger.services.exceptions import LedgerInternalError, LedgerValidationError
from ledger.services.store import LedgerStore
from ledger.utils import (
    SUPPLIER_MAX_LENGTH,
    ZERO,
    fits_money_column,
    money,
    normalize_supplier_name,
    try_money,
)

logger = logging.getLogger("ledger")

# Fixed pool of striped locks keyed by supplier_key; two keys may share a stripe.
LOCK_STRIPES = 64
_supplier_locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))


def _supplier_lock(supplier_key: str) -> threading.Lock:
    return _supplier_locks[hash(supplier_key) % LOCK_STRIPES]


@dataclass(frozen=True)
class Allocation:
    expenditure_id: int
    applied: Decimal


@dataclass
class PaymentAllocation:
    payment: SupplierPayment
    allocations: list[Allocation] = field(default_factory=list)
    unallocated: Decimal = ZERO
    synthesized: Expenditure | None = None

    @property
    def allocated(self) -> Decimal:
        return sum((a.applied for a in self.allocations), ZERO)


# ------------------------------
# Steps
# ------------------------------
def _synthesize_debt(
    *, store: LedgerStore, supplier: str, amount: Decimal, payment_method: str
) -> Expenditure:
    expenditure = store.add_expenditure(
        recipient=supplier,
        description=f"Manual payment for {supplier}"[:255],
        amount=amount,
        items=Expenditure.ITEMS_MANUAL,
        category=Expenditure.CATEGORY_PARTS,
        payment_method=payment_method,
    )
    logger.info(
        "No outstanding debt; synthesized expenditure for payment",
        extra={"supplier_key": expenditure.supplier_key, "expenditure_id": expenditure.id},
    )
    return expenditure


def _walk_fifo(
    *, store: LedgerStore, candidates: list[Expenditure], amount: Decimal
) -> tuple[list[Allocation], Decimal]:
    left = amount
    allocations: list[Allocation] = []

    for expenditure in candidates:
        if left <= ZERO:
            break

        if expenditure.is_settled:
            continue

        to_apply = min(expenditure.remaining_amount, left)

        expenditure.paid_amount = money(expenditure.paid_amount + to_apply)
        expenditure.remaining_amount = money(expenditure.remaining_amount - to_apply)
        store.save_expenditure(expenditure)

        allocations.append(Allocation(expenditure_id=expenditure.id, applied=to_apply))
        left = money(left - to_apply)

    return allocations, left


def _settle_overpayment(*, supplier_key: str, remainder: Decimal) -> Decimal:
    """
    Remainder after every candidate is cleared. Discarded from the ledger;
    returned so the payment row can record it as unallocated.
    """
    if remainder > ZERO:
        logger.warning(
            "Supplier payment exceeds outstanding debt; excess not credited",
            extra={"supplier_key": supplier_key, "unallocated": str(remainder)},
        )
    return remainder


# ------------------------------
# Entry point
# ------------------------------
@transaction.atomic
def _allocate_and_record(
    *,
    store: LedgerStore,
    supplier: str,
    supplier_key: str,
    amount: Decimal,
    payment_method: str,
    description: str,
    performed_by: str,
) -> PaymentAllocation:
    candidates = store.outstanding_expenditures(supplier_key, for_update=True)

    synthesized = None
    if not candidates:
        synthesized = _synthesize_debt(
            store=store,
            supplier=supplier,
            amount=amount,
            payment_method=payment_method,
        )
        candidates = [synthesized]

    allocations, left = _walk_fifo(store=store, candidates=candidates, amount=amount)
    unallocated = _settle_overpayment(supplier_key=supplier_key, remainder=left)

    payment = store.add_payment(
        supplier=supplier,
        amount=amount,
        payment_method=payment_method,
        description=description[:255],
        allocated_amount=money(amount - unallocated),
        unallocated_amount=unallocated,
        created_by=(performed_by or "")[:150],
    )

    get_broadcaster().publish_on_commit(
        EVENT_SUPPLIER_PAYMENT_CREATED, payment_payload(payment)
    )
    return PaymentAllocation(
        payment=payment,
        allocations=allocations,
        unallocated=unallocated,
        synthesized=synthesized,
    )


def record_supplier_payment(
    *,
    supplier: str,
    amount,
    payment_method: str,
    description: str = "",
    performed_by: str = "",
    store: LedgerStore | None = None,
) -> PaymentAllocation:
    store = store or LedgerStore()

    supplier_key = normalize_supplier_name(supplier)
    if not supplier_key:
        raise LedgerValidationError("supplier is required")
    if len(supplier) > SUPPLIER_MAX_LENGTH:
        raise LedgerValidationError("supplier is too long")

    amt = try_money(amount)
    if amt is None or amt <= ZERO:
        raise LedgerValidationError("amount must be > 0")
    if not fits_money_column(amt):
        raise LedgerValidationError("amount is too large")

    payment_method = (payment_method or "").strip()
    if not payment_method:
        raise LedgerValidationError("payment_method is required")

    description = (description or "").strip() or f"Payment to {supplier}"

    # Held until the atomic block has committed.
    with _supplier_lock(supplier_key):
        try:
            result = _allocate_and_record(
                store=store,
                supplier=supplier,
                supplier_key=supplier_key,
                amount=amt,
                payment_method=payment_method,
                description=description,
                performed_by=performed_by,
            )
        except (ValidationError, DatabaseError) as exc:
            logger.exception(
                "Supplier payment failed", extra={"supplier_key": supplier_key}
            )
            raise LedgerInternalError("Failed to record supplier payment") from exc

    logger.info(
        "Supplier payment recorded",
        extra={
            "payment_id": result.payment.id,
            "supplier_key": supplier_key,
            "amount": str(amt),
            "allocations": len(result.allocations),
            "unallocated": str(result.unallocated),
            "performed_by": performed_by,
        },
    )
    return result
