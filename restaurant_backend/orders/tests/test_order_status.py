# orders/tests/test_order_status.py

import uuid
from unittest import mock

from django.test import SimpleTestCase, TestCase, override_settings

from orders.models import Order, OrderItem
from orders.services.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from orders.services.order_status import (
    TRANSITIONS,
    allowed_transitions,
    is_valid_transition,
    update_status,
)
from orders.tests.factories import make_order, make_product

S = Order.Status


class TransitionTableTests(SimpleTestCase):
    def test_table_covers_every_status(self):
        self.assertEqual(set(TRANSITIONS), set(S.values))

    def test_documented_transitions(self):
        self.assertTrue(is_valid_transition(S.OPEN, S.CONFIRMED))
        self.assertTrue(is_valid_transition(S.PREPARED, S.ON_ROUTE))
        self.assertTrue(is_valid_transition(S.DELIVERED, S.OPEN))
        self.assertFalse(is_valid_transition(S.OPEN, S.DELIVERED))
        self.assertFalse(is_valid_transition(S.ON_ROUTE, S.OPEN))

    def test_cancelled_is_final(self):
        self.assertEqual(allowed_transitions(S.CANCELLED), frozenset())
        for target in S.values:
            self.assertFalse(is_valid_transition(S.CANCELLED, target))

    def test_unknown_status_has_no_transitions(self):
        self.assertEqual(allowed_transitions("ARCHIVED"), frozenset())


class UpdateStatusTests(TestCase):
    """
    GUARANTEES:
    - Valid transitions are applied
    - Invalid transitions are applied with a warning (lenient default)
    - Strict mode rejects invalid transitions without touching the order
    - Terminal statuses set closed_at; reopening clears it
    - PREPARED marks unfinished items READY
    """

    def setUp(self):
        self.product = make_product()
        self.order = make_order(product=self.product)

    def test_valid_transition_is_applied(self):
        order = update_status(order_id=self.order.pk, target_status=S.CONFIRMED)

        self.assertEqual(order.status, S.CONFIRMED)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, S.CONFIRMED)
        self.assertIsNone(self.order.closed_at)

    def test_unknown_target_status_is_rejected(self):
        with self.assertRaises(OrderValidationError):
            update_status(order_id=self.order.pk, target_status="ARCHIVED")

    def test_missing_order_raises_not_found(self):
        with self.assertRaises(OrderNotFoundError):
            update_status(order_id=uuid.uuid4(), target_status=S.CONFIRMED)

    def test_invalid_transition_is_applied_with_warning(self):
        with self.assertLogs("orders", level="WARNING") as logs:
            update_status(order_id=self.order.pk, target_status=S.DELIVERED)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, S.DELIVERED)
        self.assertTrue(any("INVALID_STATUS_TRANSITION_ALLOWED" in line for line in logs.output))

    @override_settings(ORDERS={"STRICT_STATUS_TRANSITIONS": True})
    def test_strict_mode_rejects_invalid_transition(self):
        self.order.status = S.CANCELLED
        self.order.save(update_fields=["status"])

        with self.assertLogs("orders", level="WARNING"):
            with self.assertRaises(InvalidTransitionError) as ctx:
                update_status(order_id=self.order.pk, target_status=S.OPEN)

        self.assertEqual(ctx.exception.from_status, S.CANCELLED)
        self.assertEqual(ctx.exception.to_status, S.OPEN)
        self.assertEqual(ctx.exception.allowed, [])
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, S.CANCELLED)

    @override_settings(ORDERS={"STRICT_STATUS_TRANSITIONS": True})
    def test_strict_mode_still_applies_valid_transition(self):
        update_status(order_id=self.order.pk, target_status=S.IN_PREPARATION)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, S.IN_PREPARATION)

    def test_terminal_status_sets_closed_at(self):
        update_status(order_id=self.order.pk, target_status=S.CANCELLED)
        self.order.refresh_from_db()
        self.assertIsNotNone(self.order.closed_at)
        self.assertTrue(self.order.is_closed)

    def test_reopening_clears_closed_at(self):
        self.order.status = S.PREPARED
        self.order.save(update_fields=["status"])
        update_status(order_id=self.order.pk, target_status=S.DELIVERED)
        self.order.refresh_from_db()
        self.assertIsNotNone(self.order.closed_at)

        update_status(order_id=self.order.pk, target_status=S.OPEN)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, S.OPEN)
        self.assertIsNone(self.order.closed_at)

    def test_prepared_marks_unfinished_items_ready(self):
        served = OrderItem.objects.create(
            order=self.order, product=self.product, quantity=1,
            unit_price=self.product.unit_price, status=OrderItem.Status.SERVED,
        )
        cooking = OrderItem.objects.create(
            order=self.order, product=self.product, quantity=2,
            unit_price=self.product.unit_price, status=OrderItem.Status.COOKING,
        )
        self.order.status = S.IN_PREPARATION
        self.order.save(update_fields=["status"])

        update_status(order_id=self.order.pk, target_status=S.PREPARED)

        statuses = dict(self.order.items.values_list("id", "status"))
        self.assertEqual(statuses[served.pk], OrderItem.Status.SERVED)
        self.assertEqual(statuses[cooking.pk], OrderItem.Status.READY)
        self.assertNotIn(OrderItem.Status.PENDING, statuses.values())

    def test_broadcast_is_scheduled_after_commit(self):
        with mock.patch("kds.services.broadcast._publish") as publish:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                update_status(order_id=self.order.pk, target_status=S.CONFIRMED)

        self.assertEqual(len(callbacks), 1)
        publish.assert_called_once()
        published_order, event = publish.call_args.args
        self.assertEqual(published_order.pk, self.order.pk)
        self.assertEqual(published_order.status, S.CONFIRMED)
        self.assertEqual(event, "order.updated")

    def test_broadcast_failure_does_not_fail_status_update(self):
        with mock.patch(
            "kds.services.broadcast.get_channel_layer",
            side_effect=RuntimeError("layer down"),
        ), self.assertLogs("kds", level="ERROR") as logs:
            with self.captureOnCommitCallbacks(execute=True):
                order = update_status(order_id=self.order.pk, target_status=S.CONFIRMED)

        self.assertEqual(order.status, S.CONFIRMED)
        self.assertTrue(any("KDS_BROADCAST_FAILED" in line for line in logs.output))

    def test_rejected_transition_schedules_no_broadcast(self):
        with override_settings(ORDERS={"STRICT_STATUS_TRANSITIONS": True}):
            with self.captureOnCommitCallbacks() as callbacks, self.assertLogs("orders", level="WARNING"):
                with self.assertRaises(InvalidTransitionError):
                    update_status(order_id=self.order.pk, target_status=S.DELIVERED)

        self.assertEqual(callbacks, [])
