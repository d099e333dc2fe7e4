# PATH: ledger/services/expenditure_service.py

"""
EXPENDITURE DERIVER

Turns a posted transaction's external purchases into supplier debits.

Input shape (per line, loosely structured):
    {"supplier": "Hub", "item": "Screen", "cost": 1200}
Compatibility keys from older clients:
    "customStore" / "custom_store" / "store"  (supplier wins, then customStore)

Rules:
- One Expenditure per line with a positive numeric cost
- Lines with missing / zero / negative / non-numeric cost are skipped
- Lines whose cost or supplier name cannot be stored are skipped
- Lines with no supplier name are skipped
- Item names longer than the column are cut, never rejected
- Anything that is not a list (or a JSON string of a list) yields nothing
- Never raises on malformed input: the transaction is already valid

Also hosts manual debit creation (an expenditure not tied to a transaction).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from ledger.events import EVENT_EXPENDITURE_CREATED, expenditure_payload, get_broadcaster
from ledger.models import Expenditure, RepairTransaction
from ledger.services.exceptions import LedgerInternalError, LedgerValidationError
from ledger.services.store import LedgerStore
from ledger.utils import (
    SUPPLIER_MAX_LENGTH,
    ZERO,
    fits_money_column,
    normalize_supplier_name,
    try_money,
)

logger = logging.getLogger("ledger")

DEFAULT_ITEM = "Parts"
ITEM_MAX_LENGTH = 200
SUPPLIER_KEYS = ("supplier", "customStore", "custom_store", "store")


@dataclass(frozen=True)
class ExternalPurchaseLine:
    supplier: str
    item: str
    cost: Decimal


def _supplier_of(line: dict) -> str:
    for key in SUPPLIER_KEYS:
        value = line.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def parse_external_purchases(raw, *, transaction_id=None) -> list[ExternalPurchaseLine]:
    """
    Lenient parse. Returns only the usable lines.
    """
    if raw in (None, "", []):
        return []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning(
                "external_purchases is not valid JSON; no expenditures derived",
                extra={"transaction_id": transaction_id},
            )
            return []

    if not isinstance(raw, list):
        logger.warning(
            "external_purchases is not a list; no expenditures derived",
            extra={"transaction_id": transaction_id, "kind": type(raw).__name__},
        )
        return []

    lines: list[ExternalPurchaseLine] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            logger.warning(
                "Skipping external purchase line that is not an object",
                extra={"transaction_id": transaction_id, "line": index},
            )
            continue

        cost = try_money(entry.get("cost"))
        if cost is None or cost <= ZERO:
            continue

        if not fits_money_column(cost):
            logger.warning(
                "Skipping external purchase line with out-of-range cost",
                extra={"transaction_id": transaction_id, "line": index},
            )
            continue

        supplier = _supplier_of(entry)
        if not supplier:
            logger.warning(
                "Skipping external purchase line without supplier",
                extra={"transaction_id": transaction_id, "line": index},
            )
            continue

        if len(supplier) > SUPPLIER_MAX_LENGTH:
            supplier = supplier.strip()
        if len(supplier) > SUPPLIER_MAX_LENGTH:
            logger.warning(
                "Skipping external purchase line with oversized supplier name",
                extra={"transaction_id": transaction_id, "line": index},
            )
            continue

        item = entry.get("item")
        item = item.strip() if isinstance(item, str) and item.strip() else DEFAULT_ITEM

        lines.append(
            ExternalPurchaseLine(supplier=supplier, item=item[:ITEM_MAX_LENGTH], cost=cost)
        )

    return lines


def derive_expenditures(
    txn: RepairTransaction, *, store: LedgerStore | None = None
) -> list[Expenditure]:
    store = store or LedgerStore()

    created: list[Expenditure] = []
    for line in parse_external_purchases(txn.external_purchases, transaction_id=txn.id):
        expenditure = store.add_expenditure(
            recipient=line.supplier,
            description=f"Parts for {txn.customer_name} - {txn.device_model} ({line.item})"[:255],
            amount=line.cost,
            items=line.item,
            category=Expenditure.CATEGORY_PARTS,
            payment_method=Expenditure.PAYMENT_PENDING,
            source_transaction_id=txn.id,
        )
        created.append(expenditure)

    if created:
        logger.info(
            "Derived expenditures from transaction",
            extra={"transaction_id": txn.id, "count": len(created)},
        )
    return created


# ------------------------------
# Manual debits
# ------------------------------
def _checked_money(value, name: str, *, required: bool = True) -> Decimal:
    if value in (None, "") and not required:
        return ZERO
    amount = try_money(value)
    if amount is None:
        raise LedgerValidationError(f"{name} must be a number")
    if amount < ZERO:
        raise LedgerValidationError(f"{name} cannot be negative")
    if not fits_money_column(amount):
        raise LedgerValidationError(f"{name} is too large")
    return amount


@transaction.atomic
def create_manual_expenditure(
    *,
    recipient: str,
    description: str,
    amount,
    category: str = Expenditure.CATEGORY_PARTS,
    payment_method: str = Expenditure.PAYMENT_PENDING,
    items: str = "",
    paid_amount=None,
    performed_by: str = "",
    store: LedgerStore | None = None,
) -> Expenditure:
    """
    Records a supplier debit entered by hand (not derived from a transaction).
    A debit may be entered as partly paid; paid_amount never exceeds amount.
    """
    store = store or LedgerStore()

    if not normalize_supplier_name(recipient):
        raise LedgerValidationError("recipient is required")
    if len(recipient) > SUPPLIER_MAX_LENGTH:
        raise LedgerValidationError("recipient is too long")

    description = (description or "").strip()
    if not description:
        raise LedgerValidationError("description is required")

    amt = _checked_money(amount, "amount")
    paid = _checked_money(paid_amount, "paid_amount", required=False)
    if paid > amt:
        raise LedgerValidationError("paid_amount cannot exceed amount")

    try:
        expenditure = store.add_expenditure(
            recipient=recipient,
            description=description[:255],
            amount=amt,
            paid_amount=paid,
            items=(items or "").strip()[:ITEM_MAX_LENGTH],
            category=(category or "").strip() or Expenditure.CATEGORY_PARTS,
            payment_method=(payment_method or "").strip() or Expenditure.PAYMENT_PENDING,
        )
    except ValidationError as exc:
        raise LedgerValidationError("; ".join(exc.messages)) from exc
    except DatabaseError as exc:
        logger.exception(
            "Manual expenditure failed",
            extra={"supplier_key": normalize_supplier_name(recipient)},
        )
        raise LedgerInternalError("Failed to create expenditure") from exc

    logger.info(
        "Manual expenditure recorded",
        extra={
            "expenditure_id": expenditure.id,
            "supplier_key": expenditure.supplier_key,
            "amount": str(amt),
            "performed_by": performed_by,
        },
    )

    get_broadcaster().publish_on_commit(
        EVENT_EXPENDITURE_CREATED, expenditure_payload(expenditure)
    )
    return expenditure
