# ledger/api/pagination.py

from rest_framework.pagination import LimitOffsetPagination


class LedgerLimitOffsetPagination(LimitOffsetPagination):
    """
    ?limit=&offset= paging for ledger lists.

    Without ?limit= the full list is returned as a plain array (the dashboard
    default); with it the body is {count, next, previous, results}.
    """

    default_limit = None
    max_limit = 500
