# PATH: ledger/services/transaction_service.py

"""
TRANSACTION POSTING SERVICE

Responsibilities:
- Persist a repair transaction exactly once (no dedup: posting twice = two rows)
- Derive supplier expenditures from its external purchases
- Publish transactionCreated after commit

Atomicity:
- Transaction + derived expenditures commit together or not at all
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from ledger.events import EVENT_TRANSACTION_CREATED, get_broadcaster, transaction_payload
from ledger.models import Expenditure, RepairTransaction
from ledger.services.exceptions import LedgerInternalError, LedgerValidationError
from ledger.services.expenditure_service import derive_expenditures
from ledger.services.store import LedgerStore
from ledger.utils import ZERO, try_money

logger = logging.getLogger("ledger")

TRANSACTION_FIELDS = (
    "customer_name",
    "mobile_number",
    "device_model",
    "repair_type",
    "repair_cost",
    "payment_method",
    "amount_given",
    "change_returned",
    "status",
    "remarks",
    "external_purchases",
)
MONEY_FIELDS = ("repair_cost", "amount_given", "change_returned")


@dataclass
class PostedTransaction:
    transaction: RepairTransaction
    expenditures: list[Expenditure] = field(default_factory=list)


def _validation_message(exc: ValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(
            f"{name}: {' '.join(messages)}" for name, messages in exc.message_dict.items()
        )
    return " ".join(exc.messages)


def _transaction_fields(data: dict) -> dict:
    fields = {name: data[name] for name in TRANSACTION_FIELDS if name in data}
    for name in MONEY_FIELDS:
        if name not in fields:
            continue
        if fields[name] in (None, ""):
            fields[name] = ZERO
            continue
        amount = try_money(fields[name])
        if amount is None:
            raise LedgerValidationError(f"{name} must be a number")
        fields[name] = amount
    if not fields.get("status"):
        fields.pop("status", None)
    return fields


@transaction.atomic
def post_transaction(
    *,
    data: dict,
    performed_by: str = "",
    store: LedgerStore | None = None,
) -> PostedTransaction:
    store = store or LedgerStore()

    try:
        txn = store.add_transaction(
            **_transaction_fields(data),
            created_by=(performed_by or "")[:150],
        )
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    try:
        expenditures = derive_expenditures(txn, store=store)
    except (ValidationError, DatabaseError) as exc:
        logger.exception(
            "Failed to derive expenditures", extra={"transaction_id": txn.id}
        )
        raise LedgerInternalError("Failed to save transaction") from exc

    logger.info(
        "Repair transaction posted",
        extra={
            "transaction_id": txn.id,
            "repair_cost": str(txn.repair_cost),
            "expenditures": len(expenditures),
            "performed_by": performed_by,
        },
    )

    get_broadcaster().publish_on_commit(
        EVENT_TRANSACTION_CREATED, transaction_payload(txn)
    )
    return PostedTransaction(transaction=txn, expenditures=expenditures)
