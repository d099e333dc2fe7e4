# PATH: ledger/services/reset_service.py

"""
ADMIN RESET

Wipes ONE ledger collection and restarts its id counter at 1.
Collections are independent: clearing expenditures leaves transactions and
supplier payments untouched (and vice versa).

Authorization is enforced by the caller (IsAdmin on the API, shell access for
the management command).
"""

from __future__ import annotations

import logging

from django.db import DatabaseError, transaction

from ledger.events import EVENT_DATA_CLEARED, get_broadcaster
from ledger.services.exceptions import LedgerInternalError, LedgerValidationError
from ledger.services.store import (
    COLLECTION_EXPENDITURES,
    COLLECTION_SUPPLIER_PAYMENTS,
    COLLECTION_TRANSACTIONS,
    COLLECTIONS,
    LedgerStore,
)

logger = logging.getLogger("ledger")


def clear_collection(
    collection: str, *, performed_by: str = "", store: LedgerStore | None = None
) -> int:
    if collection not in COLLECTIONS:
        raise LedgerValidationError(
            f"Unknown collection '{collection}'. Use one of: {', '.join(COLLECTIONS)}"
        )

    store = store or LedgerStore()

    try:
        with transaction.atomic():
            removed = store.clear(collection)
            get_broadcaster().publish_on_commit(EVENT_DATA_CLEARED, {"type": collection})
    except DatabaseError as exc:
        logger.exception("Ledger reset failed", extra={"collection": collection})
        raise LedgerInternalError(f"Failed to clear {collection}") from exc

    logger.warning(
        "Ledger collection cleared",
        extra={"collection": collection, "removed": removed, "performed_by": performed_by},
    )
    return removed


def clear_transactions(*, performed_by: str = "", store: LedgerStore | None = None) -> int:
    return clear_collection(COLLECTION_TRANSACTIONS, performed_by=performed_by, store=store)


def clear_expenditures(*, performed_by: str = "", store: LedgerStore | None = None) -> int:
    return clear_collection(COLLECTION_EXPENDITURES, performed_by=performed_by, store=store)


def clear_supplier_payments(
    *, performed_by: str = "", store: LedgerStore | None = None
) -> int:
    return clear_collection(
        COLLECTION_SUPPLIER_PAYMENTS, performed_by=performed_by, store=store
    )
