# PATH: ledger/api/views/resets.py

"""
ADMIN RESETS

POST /api/ledger/transactions/clear/
POST /api/ledger/expenditures/clear/
POST /api/ledger/supplier-payments/clear/

- Admin role only
- Each endpoint wipes exactly one collection and restarts its ids at 1
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ledger.api.views.base import actor, service_error_response
from ledger.services.exceptions import LedgerServiceError
from ledger.services.reset_service import clear_collection
from users.permissions import IsAdmin


class ClearCollectionView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    collection: str = ""

    @extend_schema(tags=["ledger"], request=None, responses={200: dict, 403: dict})
    def post(self, request, *args, **kwargs):
        try:
            removed = clear_collection(self.collection, performed_by=actor(request))
        except LedgerServiceError as exc:
            return service_error_response(exc, failure=f"Failed to clear {self.collection}")

        return Response(
            {"detail": f"{self.collection} cleared", "type": self.collection, "removed": removed},
            status=status.HTTP_200_OK,
        )
