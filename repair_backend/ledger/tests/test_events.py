# ledger/tests/test_events.py

import json
from decimal import Decimal

from django.test import TestCase

from ledger.api.serializers import ExpenditureSerializer
from ledger.events import (
    EVENT_CONNECTED,
    EVENT_DATA_CLEARED,
    EVENT_EXPENDITURE_CREATED,
    EVENT_RESYNC,
    EVENT_SUPPLIER_PAYMENT_CREATED,
    EVENT_TRANSACTION_CREATED,
    Broadcaster,
    LedgerEvent,
    format_sse,
    get_broadcaster,
    stream_events,
)
from ledger.services.exceptions import LedgerValidationError
from ledger.services.expenditure_service import create_manual_expenditure
from ledger.services.payment_service import record_supplier_payment
from ledger.services.reset_service import clear_expenditures
from ledger.services.transaction_service import post_transaction


def _parse_frame(frame: str):
    lines = dict(line.split(": ", 1) for line in frame.strip().splitlines())
    return lines["event"], json.loads(lines["data"])


class BroadcasterTests(TestCase):
    """
    GUARANTEES:
    - Fan-out to every current subscriber
    - publish never blocks; a full queue flags the subscriber for resync
    """

    def test_publish_reaches_all_subscribers(self):
        broadcaster = Broadcaster(queue_size=5)
        with broadcaster.subscribe() as a, broadcaster.subscribe() as b:
            delivered = broadcaster.publish(LedgerEvent("ping", {"n": 1}))

            self.assertEqual(delivered, 2)
            self.assertEqual(a.get(timeout=0).payload, {"n": 1})
            self.assertEqual(b.get(timeout=0).payload, {"n": 1})

        self.assertEqual(broadcaster.subscriber_count, 0)

    def test_late_subscriber_gets_no_replay(self):
        broadcaster = Broadcaster(queue_size=5)
        broadcaster.publish(LedgerEvent("ping"))

        with broadcaster.subscribe() as sub:
            self.assertIsNone(sub.get(timeout=0))

    def test_full_queue_drops_and_flags_overflow(self):
        broadcaster = Broadcaster(queue_size=1)
        with broadcaster.subscribe() as slow, broadcaster.subscribe(maxsize=10) as fast:
            broadcaster.publish(LedgerEvent("first"))
            delivered = broadcaster.publish(LedgerEvent("second"))

            self.assertEqual(delivered, 1)
            self.assertEqual([e.kind for e in slow.drain()], ["first"])
            self.assertEqual([e.kind for e in fast.drain()], ["first", "second"])
            self.assertTrue(slow.take_overflow())
            self.assertFalse(slow.take_overflow())
            self.assertFalse(fast.take_overflow())

    def test_sse_frame_format(self):
        frame = format_sse(LedgerEvent(EVENT_DATA_CLEARED, {"type": "expenditures"}))
        self.assertTrue(frame.endswith("\n\n"))
        self.assertEqual(
            _parse_frame(frame), (EVENT_DATA_CLEARED, {"type": "expenditures"})
        )

    def test_stream_connects_forwards_and_unsubscribes(self):
        broadcaster = Broadcaster(queue_size=1)
        stream = stream_events(broadcaster, heartbeat=0.01)

        kind, _ = _parse_frame(next(stream))
        self.assertEqual(kind, EVENT_CONNECTED)
        self.assertEqual(broadcaster.subscriber_count, 1)

        broadcaster.publish(LedgerEvent("first", {"n": 1}))
        broadcaster.publish(LedgerEvent("second", {"n": 2}))

        kind, _ = _parse_frame(next(stream))
        self.assertEqual(kind, EVENT_RESYNC)
        self.assertEqual(_parse_frame(next(stream)), ("first", {"n": 1}))
        self.assertEqual(next(stream), ": keepalive\n\n")

        stream.close()
        self.assertEqual(broadcaster.subscriber_count, 0)


class MutationEventTests(TestCase):
    """
    One event per committed mutation, none for rejected ones.
    """

    def setUp(self):
        self.subscription = get_broadcaster().subscribe(maxsize=50)

    def tearDown(self):
        self.subscription.close()

    def test_transaction_post_publishes_after_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            posted = post_transaction(
                data={
                    "customer_name": "Jane Doe",
                    "mobile_number": "0712345678",
                    "device_model": "Nokia 3310",
                    "repair_type": "Keypad",
                    "repair_cost": Decimal("300.00"),
                    "payment_method": "Cash",
                }
            )
            self.assertEqual(self.subscription.drain(), [])

        self.assertEqual(len(callbacks), 1)
        callbacks[0]()

        events = self.subscription.drain()
        self.assertEqual([e.kind for e in events], [EVENT_TRANSACTION_CREATED])
        self.assertEqual(events[0].payload["id"], posted.transaction.id)
        self.assertEqual(events[0].payload["repair_cost"], "300.00")

    def test_payment_and_reset_publish(self):
        with self.captureOnCommitCallbacks(execute=True):
            payment = record_supplier_payment(
                supplier="Hub", amount="10.00", payment_method="Cash"
            ).payment
            clear_expenditures()

        events = self.subscription.drain()
        self.assertEqual(
            [e.kind for e in events],
            [EVENT_SUPPLIER_PAYMENT_CREATED, EVENT_DATA_CLEARED],
        )
        self.assertEqual(events[0].payload["id"], payment.id)
        self.assertEqual(events[1].payload, {"type": "expenditures"})

    def test_rejected_mutation_publishes_nothing(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(LedgerValidationError):
                record_supplier_payment(supplier="Hub", amount="0", payment_method="Cash")

        self.assertEqual(callbacks, [])
        self.assertEqual(self.subscription.drain(), [])

    def test_full_subscriber_queue_does_not_block_mutation(self):
        self.subscription.close()
        self.subscription = get_broadcaster().subscribe(maxsize=1)

        with self.captureOnCommitCallbacks(execute=True):
            for _ in range(3):
                record_supplier_payment(supplier="Hub", amount="1.00", payment_method="Cash")

        self.assertEqual(len(self.subscription.drain()), 1)
        self.assertTrue(self.subscription.take_overflow())

    def test_manual_expenditure_publishes_plain_payload(self):
        with self.captureOnCommitCallbacks(execute=True):
            exp = create_manual_expenditure(
                recipient="Hub", description="Spare screens", amount="400"
            )

        events = self.subscription.drain()
        self.assertEqual([e.kind for e in events], [EVENT_EXPENDITURE_CREATED])

        payload = events[0].payload
        self.assertEqual(set(payload), set(ExpenditureSerializer(exp).data))
        self.assertEqual(payload["remaining_amount"], "400.00")
        self.assertIsInstance(payload["created_at"], str)
        self.assertEqual(json.loads(events[0].to_json())["id"], exp.id)
