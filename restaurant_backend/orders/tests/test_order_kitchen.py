# orders/tests/test_order_kitchen.py

import uuid
from datetime import date

from django.test import TestCase, override_settings

from orders.models import Order, OrderItem
from orders.services.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from orders.services.order_kitchen import (
    active_kitchen_orders,
    allowed_item_transitions,
    mark_all_served,
    update_item_status,
)
from orders.tests.factories import make_order, make_product

Item = OrderItem.Status


class MarkAllServedTests(TestCase):
    def setUp(self):
        self.product = make_product()
        self.order = make_order(product=self.product)
        OrderItem.objects.create(
            order=self.order, product=self.product, quantity=1,
            unit_price=self.product.unit_price, status=Item.READY,
        )

    def test_every_item_becomes_served(self):
        mark_all_served(order_id=self.order.pk)
        self.assertEqual(set(self.order.items.values_list("status", flat=True)), {Item.SERVED})

    def test_is_idempotent(self):
        mark_all_served(order_id=self.order.pk)
        mark_all_served(order_id=self.order.pk)
        self.assertEqual(set(self.order.items.values_list("status", flat=True)), {Item.SERVED})

    def test_does_not_change_order_status(self):
        mark_all_served(order_id=self.order.pk)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.OPEN)

    def test_missing_order(self):
        with self.assertRaises(OrderNotFoundError):
            mark_all_served(order_id=uuid.uuid4())

    def test_broadcast_scheduled(self):
        with self.captureOnCommitCallbacks() as callbacks:
            mark_all_served(order_id=self.order.pk)
        self.assertEqual(len(callbacks), 1)


class ItemStatusTests(TestCase):
    def setUp(self):
        self.product = make_product()
        self.order = make_order(product=self.product)
        self.item = self.order.items.get()

    def test_forward_progression(self):
        self.assertEqual(allowed_item_transitions(Item.PENDING), frozenset({Item.COOKING, Item.READY, Item.SERVED}))
        item = update_item_status(item_id=self.item.pk, target_status=Item.COOKING)
        self.assertEqual(item.status, Item.COOKING)

    def test_skipping_forward_is_allowed(self):
        update_item_status(item_id=self.item.pk, target_status=Item.SERVED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, Item.SERVED)

    def test_backward_move_is_warned_and_applied(self):
        self.item.status = Item.READY
        self.item.save(update_fields=["status"])

        with self.assertLogs("orders", level="WARNING") as logs:
            update_item_status(item_id=self.item.pk, target_status=Item.COOKING)

        self.item.refresh_from_db()
        self.assertEqual(self.item.status, Item.COOKING)
        self.assertTrue(any("INVALID_ITEM_TRANSITION_ALLOWED" in line for line in logs.output))

    @override_settings(ORDERS={"STRICT_STATUS_TRANSITIONS": True})
    def test_backward_move_rejected_in_strict_mode(self):
        self.item.status = Item.SERVED
        self.item.save(update_fields=["status"])

        with self.assertRaises(InvalidTransitionError):
            update_item_status(item_id=self.item.pk, target_status=Item.PENDING)

        self.item.refresh_from_db()
        self.assertEqual(self.item.status, Item.SERVED)

    def test_unknown_item_status(self):
        with self.assertRaises(OrderValidationError):
            update_item_status(item_id=self.item.pk, target_status="BURNT")

    def test_missing_item(self):
        with self.assertRaises(OrderNotFoundError):
            update_item_status(item_id=999999, target_status=Item.COOKING)


class KitchenQueueTests(TestCase):
    def setUp(self):
        self.product = make_product()
        self.day = date(2026, 1, 19)

    def test_only_active_orders_of_the_day_oldest_first(self):
        first = make_order(product=self.product, order_number=1, business_date=self.day)
        second = make_order(
            product=self.product, order_number=2, business_date=self.day,
            status=Order.Status.IN_PREPARATION,
        )
        make_order(product=self.product, order_number=3, business_date=self.day, status=Order.Status.DELIVERED)
        make_order(product=self.product, order_number=4, business_date=self.day, status=Order.Status.CANCELLED)
        make_order(product=self.product, order_number=1, business_date=date(2026, 1, 18))

        orders = list(active_kitchen_orders(business_date=self.day))

        self.assertEqual([o.pk for o in orders], [first.pk, second.pk])

    def test_served_items_are_not_prefetched(self):
        order = make_order(product=self.product, business_date=self.day)
        OrderItem.objects.create(
            order=order, product=self.product, quantity=1,
            unit_price=self.product.unit_price, status=Item.SERVED,
        )

        (loaded,) = active_kitchen_orders(business_date=self.day)

        self.assertEqual(len(loaded.kitchen_items), 1)
        self.assertEqual(loaded.kitchen_items[0].status, Item.PENDING)
