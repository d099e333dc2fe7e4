# ledger/utils.py

"""
Shared ledger helpers.

- Money is Decimal, quantized to two places (never float).
- Money columns are DecimalField(max_digits=14, decimal_places=2).
- Supplier identity is the trimmed, lowercased supplier name.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
MONEY_MAX = Decimal("999999999999.99")

SUPPLIER_MAX_LENGTH = 200


def money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def try_money(v) -> Decimal | None:
    """
    Lenient money parse for loosely structured input.
    Returns None for anything that is not a finite number with two places.
    """
    if v is None or isinstance(v, bool):
        return None
    try:
        amount = Decimal(str(v).strip())
        if not amount.is_finite():
            return None
        return amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return None


def fits_money_column(amount: Decimal) -> bool:
    return -MONEY_MAX <= amount <= MONEY_MAX


def normalize_supplier_name(name) -> str:
    return str(name or "").strip().lower()
