# ledger/api/serializers/expenditures.py

from rest_framework import serializers

from ledger.api.serializers.base import AliasedInputMixin, MoneyField
from ledger.models import Expenditure


class ExpenditureSerializer(serializers.ModelSerializer):
    class Meta:
        model = Expenditure
        fields = [
            "id",
            "recipient",
            "supplier_key",
            "description",
            "category",
            "items",
            "payment_method",
            "amount",
            "paid_amount",
            "remaining_amount",
            "source_transaction_id",
            "created_at",
        ]
        read_only_fields = fields


class ExpenditureCreateSerializer(AliasedInputMixin, serializers.Serializer):
    """
    Manual supplier debit (Swagger-visible input).
    """

    FIELD_ALIASES = {"paymentMethod": "payment_method", "paidAmount": "paid_amount"}

    recipient = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=255)
    amount = MoneyField(min_value=0)
    paid_amount = MoneyField(min_value=0, required=False, allow_null=True)
    category = serializers.CharField(max_length=50, required=False, allow_blank=True)
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True)
    items = serializers.CharField(
        max_length=200, required=False, allow_blank=True, allow_null=True
    )

    def validate(self, attrs):
        paid = attrs.get("paid_amount")
        if paid is not None and paid > attrs["amount"]:
            raise serializers.ValidationError({"paid_amount": "cannot exceed amount"})
        return attrs
