# PATH: ledger/api/views/expenditures.py

"""
EXPENDITURES API

GET  /api/ledger/expenditures/
    - Supplier debits, oldest first
    - ?supplier=<name> filters by normalized supplier identity
    - ?category=, ?search= (recipient, description, items)
    - ?dateRange=today|week|month, ?limit=&offset= paging

POST /api/ledger/expenditures/
    - Manager or admin
    - Records a manual supplier debit (not derived from a transaction)

GET /api/ledger/expenditures/supplier-summary/
    - {supplier_key: {totalExpenditure, totalPaid, totalRemaining, totalDue,
                      transactions, lastPayment}}
    - ?supplier=<name> restricts to one supplier
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.response import Response
from rest_framework.views import APIView

from ledger.api.filters import ExpenditureFilter
from ledger.api.pagination import LedgerLimitOffsetPagination
from ledger.api.serializers import (
    ExpenditureCreateSerializer,
    ExpenditureSerializer,
    serialize_summary,
)
from ledger.api.views.base import actor, service_error_response
from ledger.models import Expenditure
from ledger.services.exceptions import LedgerServiceError
from ledger.services.expenditure_service import create_manual_expenditure
from ledger.services.summary_service import get_supplier_summary
from users.permissions import IsManagerOrAdmin, IsStaff

SUPPLIER_PARAM = OpenApiParameter(
    name="supplier",
    type=str,
    required=False,
    description="Supplier name (case and surrounding spaces ignored)",
)


class ExpenditureListCreateView(GenericAPIView):
    serializer_class = ExpenditureCreateSerializer
    queryset = Expenditure.objects.order_by("created_at", "id")
    filterset_class = ExpenditureFilter
    pagination_class = LedgerLimitOffsetPagination

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsManagerOrAdmin()]
        return [IsStaff()]

    @extend_schema(
        tags=["ledger"],
        responses=ExpenditureSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        rows = self.filter_queryset(self.get_queryset())

        page = self.paginate_queryset(rows)
        if page is not None:
            return self.get_paginated_response(ExpenditureSerializer(page, many=True).data)
        return Response(ExpenditureSerializer(rows, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["ledger"],
        request=ExpenditureCreateSerializer,
        responses={201: ExpenditureSerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            expenditure = create_manual_expenditure(
                recipient=data["recipient"],
                description=data["description"],
                amount=data["amount"],
                category=data.get("category") or "",
                payment_method=data.get("payment_method") or "",
                items=data.get("items") or "",
                paid_amount=data.get("paid_amount"),
                performed_by=actor(request),
            )
        except LedgerServiceError as exc:
            return service_error_response(exc, failure="Failed to create expenditure")

        return Response(ExpenditureSerializer(expenditure).data, status=status.HTTP_201_CREATED)


class SupplierSummaryView(APIView):
    permission_classes = [IsStaff]

    @extend_schema(
        tags=["ledger"],
        parameters=[SUPPLIER_PARAM],
        responses={200: dict},
    )
    def get(self, request, *args, **kwargs):
        summaries = get_supplier_summary(supplier=request.query_params.get("supplier"))
        return Response(serialize_summary(summaries), status=status.HTTP_200_OK)
