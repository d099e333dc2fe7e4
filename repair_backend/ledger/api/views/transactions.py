# PATH: ledger/api/views/transactions.py

"""
REPAIR TRANSACTIONS API

GET  /api/ledger/transactions/
    - Any shop staff member
    - Oldest first
    - ?search= (customer name, mobile number, device model)
    - ?dateRange=today|week|month, ?status=, ?payment_method=
    - ?limit=&offset= paging

POST /api/ledger/transactions/
    - Any shop staff member
    - Persists the transaction and derives supplier expenditures (atomic)
    - No dedup: posting the same body twice creates two transactions

GET  /api/ledger/transactions/<id>/
    - One transaction, 404 when unknown
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from ledger.api.filters import RepairTransactionFilter
from ledger.api.pagination import LedgerLimitOffsetPagination
from ledger.api.serializers import (
    ExpenditureSerializer,
    RepairTransactionCreateSerializer,
    RepairTransactionSerializer,
)
from ledger.api.views.base import actor, service_error_response
from ledger.models import RepairTransaction
from ledger.services.exceptions import LedgerServiceError
from ledger.services.transaction_service import post_transaction
from users.permissions import IsStaff


class RepairTransactionListCreateView(GenericAPIView):
    permission_classes = [IsStaff]
    serializer_class = RepairTransactionCreateSerializer
    queryset = RepairTransaction.objects.order_by("created_at", "id")
    filterset_class = RepairTransactionFilter
    pagination_class = LedgerLimitOffsetPagination

    @extend_schema(
        tags=["ledger"],
        responses=RepairTransactionSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        rows = self.filter_queryset(self.get_queryset())

        page = self.paginate_queryset(rows)
        if page is not None:
            return self.get_paginated_response(
                RepairTransactionSerializer(page, many=True).data
            )
        return Response(
            RepairTransactionSerializer(rows, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["ledger"],
        request=RepairTransactionCreateSerializer,
        responses={201: RepairTransactionSerializer, 400: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            posted = post_transaction(data=s.validated_data, performed_by=actor(request))
        except LedgerServiceError as exc:
            return service_error_response(exc, failure="Failed to save transaction")

        body = dict(RepairTransactionSerializer(posted.transaction).data)
        body["expenditures"] = ExpenditureSerializer(posted.expenditures, many=True).data
        return Response(body, status=status.HTTP_201_CREATED)


class RepairTransactionDetailView(GenericAPIView):
    permission_classes = [IsStaff]
    serializer_class = RepairTransactionSerializer
    queryset = RepairTransaction.objects.all()

    @extend_schema(tags=["ledger"], responses={200: RepairTransactionSerializer, 404: dict})
    def get(self, request, *args, **kwargs):
        txn = self.get_object()
        return Response(RepairTransactionSerializer(txn).data, status=status.HTTP_200_OK)
