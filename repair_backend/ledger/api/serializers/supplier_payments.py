# ledger/api/serializers/supplier_payments.py

from rest_framework import serializers

from ledger.api.serializers.base import AliasedInputMixin, MoneyField
from ledger.models import SupplierPayment


class SupplierPaymentSerializer(serializers.ModelSerializer):
    """
    Output serializer (also the supplierPaymentCreated event payload).
    """

    class Meta:
        model = SupplierPayment
        fields = [
            "id",
            "supplier",
            "supplier_key",
            "amount",
            "payment_method",
            "description",
            "allocated_amount",
            "unallocated_amount",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class SupplierPaymentCreateSerializer(AliasedInputMixin, serializers.Serializer):
    """
    Input serializer (Swagger-visible).
    """

    FIELD_ALIASES = {"paymentMethod": "payment_method"}

    supplier = serializers.CharField(max_length=200)
    amount = MoneyField()
    payment_method = serializers.CharField(max_length=50)
    description = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )

    def validate_amount(self, value):
        if value is None:
            raise serializers.ValidationError("amount is required")
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value
