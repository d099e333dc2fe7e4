# ledger/api/serializers/transactions.py

from rest_framework import serializers

from ledger.api.serializers.base import AliasedInputMixin, MoneyField
from ledger.models import RepairTransaction


class RepairTransactionSerializer(serializers.ModelSerializer):
    """
    Output serializer (also the transactionCreated event payload).
    """

    class Meta:
        model = RepairTransaction
        fields = [
            "id",
            "customer_name",
            "mobile_number",
            "device_model",
            "repair_type",
            "repair_cost",
            "payment_method",
            "amount_given",
            "change_returned",
            "status",
            "remarks",
            "external_purchases",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class RepairTransactionCreateSerializer(AliasedInputMixin, serializers.Serializer):
    FIELD_ALIASES = {
        "customerName": "customer_name",
        "mobileNumber": "mobile_number",
        "deviceModel": "device_model",
        "repairType": "repair_type",
        "repairCost": "repair_cost",
        "paymentMethod": "payment_method",
        "amountGiven": "amount_given",
        "changeReturned": "change_returned",
        "externalPurchases": "external_purchases",
    }

    customer_name = serializers.CharField(max_length=200)
    mobile_number = serializers.CharField(min_length=10, max_length=20)
    device_model = serializers.CharField(max_length=200)
    repair_type = serializers.CharField(max_length=200)
    repair_cost = MoneyField(min_value=0)
    payment_method = serializers.CharField(max_length=50)
    amount_given = MoneyField(min_value=0, required=False, default=0)
    change_returned = MoneyField(min_value=0, required=False, default=0)
    status = serializers.CharField(max_length=30, required=False, allow_blank=True)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    # Stored as sent; the expenditure deriver reads it leniently.
    external_purchases = serializers.JSONField(required=False, allow_null=True)

    def validate_remarks(self, value):
        return value or ""
