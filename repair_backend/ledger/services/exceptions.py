# ledger/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for ledger services.
Views map them to responses:
- LedgerValidationError -> 400
- LedgerInternalError   -> 500 (generic message, details in the log)
"""


class LedgerServiceError(Exception):
    """Base exception for all ledger service failures."""


class LedgerValidationError(LedgerServiceError, ValueError):
    """Raised for caller-correctable input; no state was changed."""


class LedgerInternalError(LedgerServiceError):
    """Raised when a mutation failed unexpectedly and was rolled back."""
