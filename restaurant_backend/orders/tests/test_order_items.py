# orders/tests/test_order_items.py

import uuid
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from features.models import FeatureConfig
from orders.models import Order, OrderItem
from orders.services.exceptions import (
    OrderNotFoundError,
    OrderNotModifiableError,
    OrderValidationError,
)
from orders.services.order_items import add_items_to_order
from orders.tests.factories import make_order, make_product
from products.models import Ingredient, ProductIngredient, StockMovement


class AddItemsToOrderTests(TestCase):
    """
    GUARANTEES:
    - New lines are PENDING with the current product price
    - Totals grow by exactly the added amount
    - Paid and cancelled orders are left untouched
    - A delivered order is reopened
    """

    def setUp(self):
        self.burger = make_product(sku="BURGER-1", unit_price="1500.00")
        self.fries = make_product(sku="FRIES-1", name="Fries", unit_price="600.00")
        self.order = make_order(product=self.burger, status=Order.Status.IN_PREPARATION)

    def _fries(self, qty=2, **extra):
        return [{"product_id": str(self.fries.pk), "quantity": qty, **extra}]

    def test_adds_pending_items_and_raises_totals(self):
        order = add_items_to_order(order_id=self.order.pk, items=self._fries(notes="no salt"))

        self.assertEqual(order.subtotal_amount, Decimal("2700.00"))
        self.assertEqual(order.total_amount, Decimal("2700.00"))
        self.assertEqual(order.status, Order.Status.IN_PREPARATION)
        self.assertEqual(order.order_number, self.order.order_number)

        added = OrderItem.objects.get(order=self.order, product=self.fries)
        self.assertEqual(added.status, OrderItem.Status.PENDING)
        self.assertEqual(added.unit_price, Decimal("600.00"))
        self.assertEqual(added.quantity, 2)
        self.assertEqual(added.notes, "no salt")

    def test_price_is_snapshotted_at_add_time(self):
        self.fries.unit_price = Decimal("700.00")
        self.fries.save(update_fields=["unit_price"])

        order = add_items_to_order(order_id=self.order.pk, items=self._fries(1))

        self.assertEqual(order.total_amount, Decimal("2200.00"))

    def test_delivered_order_is_reopened(self):
        delivered = make_product(sku="SODA-1", name="Soda", unit_price="300.00")
        order = make_order(product=delivered, status=Order.Status.DELIVERED, order_number=2)
        Order.objects.filter(pk=order.pk).update(closed_at=order.created_at)

        reopened = add_items_to_order(order_id=order.pk, items=self._fries(1))

        self.assertEqual(reopened.status, Order.Status.OPEN)
        self.assertIsNone(reopened.closed_at)
        self.assertEqual(reopened.total_amount, Decimal("900.00"))

    def test_paid_order_rejected(self):
        Order.objects.filter(pk=self.order.pk).update(payment_status=Order.PaymentStatus.PAID)

        with self.assertRaises(OrderNotModifiableError):
            add_items_to_order(order_id=self.order.pk, items=self._fries())

        self.assertEqual(self.order.items.count(), 1)

    def test_cancelled_order_rejected(self):
        Order.objects.filter(pk=self.order.pk).update(status=Order.Status.CANCELLED)

        with self.assertRaises(OrderNotModifiableError):
            add_items_to_order(order_id=self.order.pk, items=self._fries())

    def test_missing_order(self):
        with self.assertRaises(OrderNotFoundError):
            add_items_to_order(order_id=uuid.uuid4(), items=self._fries())

    def test_invalid_lines_write_nothing(self):
        with self.assertRaises(OrderValidationError):
            add_items_to_order(order_id=self.order.pk, items=self._fries(0))

        self.order.refresh_from_db()
        self.assertEqual(self.order.total_amount, Decimal("1500.00"))
        self.assertEqual(self.order.items.count(), 1)

    def test_update_broadcast_after_commit(self):
        with mock.patch("kds.services.broadcast._publish") as publish:
            with self.captureOnCommitCallbacks(execute=True):
                add_items_to_order(order_id=self.order.pk, items=self._fries())

        publish.assert_called_once()
        self.assertEqual(publish.call_args.args[0].pk, self.order.pk)
        self.assertEqual(publish.call_args.args[1], "order.updated")

    def test_reopen_broadcasts_once(self):
        Order.objects.filter(pk=self.order.pk).update(status=Order.Status.DELIVERED)

        with mock.patch("kds.services.broadcast._publish") as publish:
            with self.captureOnCommitCallbacks(execute=True):
                add_items_to_order(order_id=self.order.pk, items=self._fries())

        publish.assert_called_once()


class AddItemsStockTests(TestCase):
    def setUp(self):
        self.burger = make_product()
        self.order = make_order(product=self.burger, quantity=2)
        self.bun = Ingredient.objects.create(name="Bun", stock=Decimal("10"))
        ProductIngredient.objects.create(product=self.burger, ingredient=self.bun, quantity=Decimal("1"))

    def test_only_new_lines_are_deducted(self):
        add_items_to_order(
            order_id=self.order.pk,
            items=[{"product_id": str(self.burger.pk), "quantity": 3}],
        )

        self.bun.refresh_from_db()
        self.assertEqual(self.bun.stock, Decimal("7.000"))
        movement = StockMovement.objects.get(order=self.order)
        self.assertEqual(movement.quantity, Decimal("3.000"))

    def test_stock_untouched_when_flag_off(self):
        FeatureConfig.objects.create(enable_stock=False)

        add_items_to_order(
            order_id=self.order.pk,
            items=[{"product_id": str(self.burger.pk), "quantity": 3}],
        )

        self.bun.refresh_from_db()
        self.assertEqual(self.bun.stock, Decimal("10.000"))
