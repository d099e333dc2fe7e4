# ledger/api/views/base.py

from rest_framework import status
from rest_framework.response import Response

from ledger.services.exceptions import LedgerInternalError, LedgerValidationError


def actor(request) -> str:
    """
    Caller identity string stored on created rows.
    """
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return ""
    return getattr(user, "username", "") or getattr(user, "email", "") or str(user.pk)


def service_error_response(exc: Exception, *, failure: str) -> Response:
    if isinstance(exc, LedgerValidationError):
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, LedgerInternalError):
        return Response({"detail": failure}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    raise exc
