# ledger/api/serializers/base.py

from rest_framework import serializers


class AliasedInputMixin:
    """
    Accepts camelCase keys from the dashboard client alongside snake_case.

    Subclasses declare FIELD_ALIASES = {"camelKey": "snake_key"}.
    The snake_case key wins when both are sent.
    """

    FIELD_ALIASES: dict[str, str] = {}

    def to_internal_value(self, data):
        if hasattr(data, "items"):
            normalized = {}
            for key, value in data.items():
                target = self.FIELD_ALIASES.get(key, key)
                if target != key and target in data:
                    continue
                normalized[target] = value
            data = normalized
        return super().to_internal_value(data)


class MoneyField(serializers.DecimalField):
    def __init__(self, **kwargs):
        kwargs.setdefault("max_digits", 14)
        kwargs.setdefault("decimal_places", 2)
        super().__init__(**kwargs)
