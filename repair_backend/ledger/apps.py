# ledger/apps.py

"""
LEDGER APP CONFIG

Supplier ledger for the repair shop:
- Repair transactions (with external part purchases)
- Expenditures (money owed to suppliers)
- Supplier payments (FIFO-allocated against expenditures)
- Live change events for connected dashboards
"""

from django.apps import AppConfig


class LedgerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ledger"
    verbose_name = "Supplier ledger"
