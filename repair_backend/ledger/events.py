# PATH: ledger/events.py

"""
LEDGER EVENT BROADCASTER

Every committed ledger mutation publishes one event to all currently
subscribed observers (dashboards holding the /api/ledger/events/ stream).

Contract:
- Kinds: transactionCreated | expenditureCreated | supplierPaymentCreated |
  dataCleared
- Delivery only to observers subscribed at publish time; no replay.
  A (re)connecting observer gets a `connected` frame and must re-fetch state
  (supplier summary, lists) before applying further events.
- Each subscriber owns a bounded outbound queue. publish() never blocks:
  when a queue is full the event is dropped for that subscriber only and the
  subscription is flagged; the stream then tells the client to resync.
- Services publish through transaction.on_commit(robust=True), so events
  only leave after the write committed and a failing publish never undoes it.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

logger = logging.getLogger("ledger.events")

EVENT_TRANSACTION_CREATED = "transactionCreated"
EVENT_SUPPLIER_PAYMENT_CREATED = "supplierPaymentCreated"
EVENT_DATA_CLEARED = "dataCleared"
EVENT_EXPENDITURE_CREATED = "expenditureCreated"

# Stream-control frames (never published by services)
EVENT_CONNECTED = "connected"
EVENT_RESYNC = "resync"

DEFAULT_QUEUE_SIZE = 100


@dataclass(frozen=True)
class LedgerEvent:
    kind: str
    payload: dict = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.payload, cls=DjangoJSONEncoder)


def format_sse(event: LedgerEvent) -> str:
    return f"event: {event.kind}\ndata: {event.to_json()}\n\n"


# ------------------------------
# Payloads (plain dicts, same keys as the REST output)
# ------------------------------
TRANSACTION_EVENT_FIELDS = (
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
)
EXPENDITURE_EVENT_FIELDS = (
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
)
PAYMENT_EVENT_FIELDS = (
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
)


def _plain(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return DjangoJSONEncoder().default(value)
    return value


def _record_payload(instance, fields) -> dict:
    return {name: _plain(getattr(instance, name)) for name in fields}


def transaction_payload(txn) -> dict:
    return _record_payload(txn, TRANSACTION_EVENT_FIELDS)


def expenditure_payload(expenditure) -> dict:
    return _record_payload(expenditure, EXPENDITURE_EVENT_FIELDS)


def payment_payload(payment) -> dict:
    return _record_payload(payment, PAYMENT_EVENT_FIELDS)


class Subscription:
    """
    One observer's outbound channel.
    """

    def __init__(self, broadcaster: "Broadcaster", maxsize: int):
        self._broadcaster = broadcaster
        self._queue: queue.Queue[LedgerEvent] = queue.Queue(maxsize=maxsize)
        self._overflowed = threading.Event()
        self.closed = False

    def offer(self, event: LedgerEvent) -> bool:
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self._overflowed.set()
            return False
        return True

    def get(self, timeout: float | None = None) -> LedgerEvent | None:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[LedgerEvent]:
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def take_overflow(self) -> bool:
        """
        True once after events were dropped for this subscriber.
        """
        if self._overflowed.is_set():
            self._overflowed.clear()
            return True
        return False

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._broadcaster.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class Broadcaster:
    def __init__(self, queue_size: int | None = None):
        self._queue_size = queue_size
        self._lock = threading.Lock()
        self._subscribers: list[Subscription] = []

    def _default_queue_size(self) -> int:
        if self._queue_size:
            return self._queue_size
        return int(getattr(settings, "LEDGER_EVENT_QUEUE_SIZE", DEFAULT_QUEUE_SIZE))

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, maxsize: int | None = None) -> Subscription:
        subscription = Subscription(self, maxsize or self._default_queue_size())
        with self._lock:
            self._subscribers.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)

    def publish(self, event: LedgerEvent) -> int:
        """
        Fan out to every current subscriber. Returns how many accepted it.
        """
        with self._lock:
            targets = list(self._subscribers)

        delivered = 0
        for subscription in targets:
            if subscription.offer(event):
                delivered += 1
            else:
                logger.warning(
                    "Dropped ledger event for slow subscriber",
                    extra={"event_kind": event.kind},
                )
        return delivered

    def publish_on_commit(self, kind: str, payload: dict) -> None:
        event = LedgerEvent(kind=kind, payload=payload)
        transaction.on_commit(lambda: self.publish(event), robust=True)


_broadcaster = Broadcaster()


def get_broadcaster() -> Broadcaster:
    return _broadcaster


def stream_events(broadcaster: Broadcaster, *, heartbeat: float):
    """
    Server-Sent Events generator for one observer.
    Subscribes before the `connected` frame, unsubscribes when the client
    goes away (generator closed).
    """
    subscription = broadcaster.subscribe()
    try:
        yield format_sse(LedgerEvent(EVENT_CONNECTED, {"resync": True}))
        while True:
            if subscription.take_overflow():
                yield format_sse(LedgerEvent(EVENT_RESYNC, {"reason": "overflow"}))

            event = subscription.get(timeout=heartbeat)
            if event is None:
                yield ": keepalive\n\n"
                continue

            yield format_sse(event)
    finally:
        subscription.close()
