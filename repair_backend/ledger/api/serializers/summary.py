# ledger/api/serializers/summary.py

"""
Supplier summary output.

Keys are camelCase (totalExpenditure, totalDue, ...) because the dashboard
consumer reads them by those names.
"""

from rest_framework import serializers

from ledger.api.serializers.expenditures import ExpenditureSerializer
from ledger.api.serializers.supplier_payments import SupplierPaymentSerializer


class SupplierSummarySerializer(serializers.Serializer):
    supplier = serializers.CharField(source="supplier_key")
    totalExpenditure = serializers.DecimalField(
        source="total_expenditure", max_digits=16, decimal_places=2
    )
    totalPaid = serializers.DecimalField(source="total_paid", max_digits=16, decimal_places=2)
    totalRemaining = serializers.DecimalField(
        source="total_remaining", max_digits=16, decimal_places=2
    )
    totalDue = serializers.DecimalField(source="total_due", max_digits=16, decimal_places=2)
    transactions = ExpenditureSerializer(many=True)
    lastPayment = SupplierPaymentSerializer(source="last_payment", allow_null=True)


def serialize_summary(summaries: dict) -> dict:
    """
    {supplier_key: {...}} mapping, as the dashboard expects.
    """
    return {
        key: SupplierSummarySerializer(summary).data
        for key, summary in summaries.items()
    }
