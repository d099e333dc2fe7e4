# PATH: ledger/api/views/supplier_payments.py

"""
SUPPLIER PAYMENTS API

GET  /api/ledger/supplier-payments/
    - Payment history, oldest first
    - ?supplier=, ?payment_method=, ?dateRange=, ?limit=&offset=

POST /api/ledger/supplier-payments/
    - Allocates the payment FIFO against the supplier's outstanding debt
    - Records the full requested amount even when it exceeds the debt
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response

from ledger.api.filters import SupplierPaymentFilter
from ledger.api.pagination import LedgerLimitOffsetPagination
from ledger.api.serializers import (
    SupplierPaymentCreateSerializer,
    SupplierPaymentSerializer,
)
from ledger.api.views.base import actor, service_error_response
from ledger.services.exceptions import LedgerServiceError
from ledger.models import SupplierPayment
from ledger.services.payment_service import record_supplier_payment
from users.permissions import IsStaff


class SupplierPaymentListCreateView(GenericAPIView):
    permission_classes = [IsStaff]
    serializer_class = SupplierPaymentCreateSerializer
    queryset = SupplierPayment.objects.order_by("created_at", "id")
    filterset_class = SupplierPaymentFilter
    pagination_class = LedgerLimitOffsetPagination

    @extend_schema(
        tags=["ledger"],
        responses=SupplierPaymentSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        rows = self.filter_queryset(self.get_queryset())

        page = self.paginate_queryset(rows)
        if page is not None:
            return self.get_paginated_response(
                SupplierPaymentSerializer(page, many=True).data
            )
        return Response(
            SupplierPaymentSerializer(rows, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["ledger"],
        request=SupplierPaymentCreateSerializer,
        responses={201: SupplierPaymentSerializer, 400: dict, 500: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = record_supplier_payment(
                supplier=data["supplier"],
                amount=data["amount"],
                payment_method=data["payment_method"],
                description=data.get("description") or "",
                performed_by=actor(request),
            )
        except LedgerServiceError as exc:
            return service_error_response(exc, failure="Failed to record supplier payment")

        body = dict(SupplierPaymentSerializer(result.payment).data)
        body["allocations"] = [
            {"expenditure_id": a.expenditure_id, "applied": str(a.applied)}
            for a in result.allocations
        ]
        return Response(body, status=status.HTTP_201_CREATED)
