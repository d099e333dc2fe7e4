# ledger/api/filters.py

"""
Query filters for ledger lists.

- ?supplier=<name> matches the normalized identity, so "Hub", "hub" and
  " HUB " are one supplier
- ?search=<text> free-text match (fields per list)
- ?dateRange=today|week|month (also date_range) keeps rows created since
  the start of today, the last 7 days, or the last calendar month
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta

import django_filters
from django.db.models import Q
from django.utils import timezone

from ledger.models import Expenditure, RepairTransaction, SupplierPayment
from ledger.utils import normalize_supplier_name

RANGE_TODAY = "today"
RANGE_WEEK = "week"
RANGE_MONTH = "month"
DATE_RANGES = (RANGE_TODAY, RANGE_WEEK, RANGE_MONTH)


def date_range_start(value: str, *, now: datetime | None = None) -> datetime:
    now = timezone.localtime(now or timezone.now())

    if value == RANGE_TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if value == RANGE_WEEK:
        return now - timedelta(days=7)
    if value == RANGE_MONTH:
        year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
        day = min(now.day, calendar.monthrange(year, month)[1])
        return now.replace(year=year, month=month, day=day)
    raise ValueError(f"Unknown date range '{value}'")


class SupplierKeyFilter(django_filters.CharFilter):
    def filter(self, qs, value):
        key = normalize_supplier_name(value)
        if not key:
            return qs
        return qs.filter(supplier_key=key)


class CreatedWithinFilter(django_filters.ChoiceFilter):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("field_name", "created_at")
        kwargs.setdefault("choices", [(name, name.title()) for name in DATE_RANGES])
        super().__init__(*args, **kwargs)

    def filter(self, qs, value):
        if not value:
            return qs
        return qs.filter(**{f"{self.field_name}__gte": date_range_start(value)})


class DateRangeFilterSet(django_filters.FilterSet):
    """
    Accepts the dashboard's camelCase ?dateRange= alongside ?date_range=.
    """

    date_range = CreatedWithinFilter()

    def __init__(self, data=None, *args, **kwargs):
        if data is not None and "dateRange" in data and "date_range" not in data:
            data = data.copy()
            data["date_range"] = data["dateRange"]
        super().__init__(data, *args, **kwargs)


class RepairTransactionFilter(DateRangeFilterSet):
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = RepairTransaction
        fields = ["search", "date_range", "status", "payment_method"]

    def filter_search(self, qs, name, value):
        value = (value or "").strip()
        if not value:
            return qs
        return qs.filter(
            Q(customer_name__icontains=value)
            | Q(mobile_number__contains=value)
            | Q(device_model__icontains=value)
        )


class ExpenditureFilter(DateRangeFilterSet):
    supplier = SupplierKeyFilter()
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Expenditure
        fields = ["supplier", "category", "search", "date_range"]

    def filter_search(self, qs, name, value):
        value = (value or "").strip()
        if not value:
            return qs
        return qs.filter(
            Q(recipient__icontains=value)
            | Q(description__icontains=value)
            | Q(items__icontains=value)
        )


class SupplierPaymentFilter(DateRangeFilterSet):
    supplier = SupplierKeyFilter()

    class Meta:
        model = SupplierPayment
        fields = ["supplier", "payment_method", "date_range"]
