# ledger/management/commands/reset_ledger.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from ledger.services.exceptions import LedgerServiceError
from ledger.services.reset_service import clear_collection
from ledger.services.store import COLLECTIONS


class Command(BaseCommand):
    help = (
        "Hard reset of ledger data: wipes transactions, expenditures and/or "
        "supplier payments and restarts their ids at 1. Use with caution."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--i-am-sure",
            action="store_true",
            help="Required safety flag. Without this, the command will not run.",
        )
        parser.add_argument(
            "--collection",
            action="append",
            choices=sorted(COLLECTIONS),
            help="Collection to clear (repeatable). Defaults to all three.",
        )

    def handle(self, *args, **options):
        if not options.get("i_am_sure"):
            self.stdout.write(self.style.ERROR("Refusing to run without --i-am-sure"))
            self.stdout.write(
                "Example: python manage.py reset_ledger --i-am-sure --collection expenditures"
            )
            return

        collections = options.get("collection") or list(COLLECTIONS)

        self.stdout.write(self.style.WARNING("RESETTING LEDGER DATA..."))

        for collection in collections:
            try:
                removed = clear_collection(collection, performed_by="manage.py")
            except LedgerServiceError as exc:
                raise CommandError(str(exc)) from exc
            self.stdout.write(f"- {collection}: {removed} removed")

        self.stdout.write(self.style.SUCCESS("Done. Ledger data cleared."))
