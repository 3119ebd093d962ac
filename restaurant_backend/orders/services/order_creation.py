# orders/services/order_creation.py

"""
ORDER CREATION (LIFECYCLE COORDINATOR)

One transaction, in this order:
1) validate input (no writes before this passes)
2) resolve the user's open cash shift -> business date
3) draw the order number
4) compute payment legs
5) insert order + items + payments
6) deduct recipe stock (feature flag enable_stock)
7) after commit: announce the order to the kitchen display

GUARANTEES:
- Any failure rolls everything back, including the sequence increment.
  No order exists without a number and no number is burned by a failed order.
- Prices are server-owned: unit_price is snapshotted from Product.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from features.services import is_feature_enabled
from kds.services import EVENT_ORDER_CREATED, schedule_order_broadcast
from orders.models import Order, OrderItem, Payment
from orders.services.business_date import get_business_date
from orders.services.exceptions import NoOpenShiftError, OrderValidationError
from orders.services.order_number import next_order_number
from orders.services.payment_service import process_payments, validate_payment_amounts
from products.models import Product
from products.services import deduct_stock_for_order
from shifts.services import get_active_shift

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


# ============================================================
# INPUT VALIDATION
# ============================================================

def _parse_quantity(raw) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise OrderValidationError("Item quantity must be an integer")
    try:
        qty = int(raw)
    except ValueError as exc:
        raise OrderValidationError("Item quantity must be an integer") from exc
    if qty < 1:
        raise OrderValidationError("Item quantity must be at least 1")
    return qty


def _parse_product_id(raw) -> uuid.UUID:
    try:
        return uuid.UUID(str(raw))
    except ValueError as exc:
        raise OrderValidationError(f"Invalid product_id: {raw}") from exc


def _validate_items(items) -> list:
    """
    Returns [(product, quantity, notes)] with products loaded in one query.
    """
    if not items:
        raise OrderValidationError("Order must contain at least one item")

    parsed = []
    for entry in items:
        if not isinstance(entry, dict) or not entry.get("product_id"):
            raise OrderValidationError("Each item requires a product_id")
        parsed.append(
            (
                _parse_product_id(entry["product_id"]),
                _parse_quantity(entry.get("quantity")),
                str(entry.get("notes") or "").strip(),
            )
        )

    wanted = {product_id for product_id, _, _ in parsed}
    products = {
        p.pk: p for p in Product.objects.filter(pk__in=wanted, is_active=True)
    }

    missing = sorted(str(product_id) for product_id in wanted - set(products))
    if missing:
        raise OrderValidationError(
            f"Products not found or inactive: {', '.join(missing)}"
        )

    return [(products[product_id], qty, notes) for product_id, qty, notes in parsed]


def _validate_channel(channel) -> str:
    channel = str(channel or Order.Channel.POS).strip().upper()
    if channel not in Order.Channel.values:
        raise OrderValidationError(f"Invalid channel: {channel}")
    if channel == Order.Channel.DELIVERY and not is_feature_enabled("enable_delivery"):
        raise OrderValidationError("Delivery orders are disabled")
    return channel


# ============================================================
# PUBLIC API
# ============================================================

def create_order(
    *,
    user,
    items,
    channel=Order.Channel.POS,
    payment_method=None,
    payments=None,
    customer_name="",
    customer_phone="",
    delivery_address="",
    delivery_notes="",
    now=None,
) -> Order:
    now = now or timezone.now()

    channel = _validate_channel(channel)
    lines = _validate_items(items)

    subtotal = sum(
        (Decimal(product.unit_price) * qty for product, qty, _ in lines),
        Decimal("0.00"),
    ).quantize(TWOPLACES)
    total = subtotal

    if payments:
        validate_payment_amounts(payments, total)

    with transaction.atomic():
        shift = get_active_shift(user=user)
        if shift is None:
            raise NoOpenShiftError("An open cash shift is required to take orders")

        business_date = shift.business_date or get_business_date(now)
        ident = next_order_number(now=now, business_date=business_date)

        payment = process_payments(
            order_total=total,
            shift=shift,
            method=payment_method,
            split=payments,
        )

        order = Order.objects.create(
            order_number=ident.order_number,
            sequence_key=ident.sequence_key,
            business_date=ident.business_date,
            channel=channel,
            status=Order.Status.CONFIRMED if payment.is_fully_paid else Order.Status.OPEN,
            payment_status=payment.payment_status,
            subtotal_amount=subtotal,
            total_amount=total,
            customer_name=str(customer_name or "").strip(),
            customer_phone=str(customer_phone or "").strip(),
            delivery_address=str(delivery_address or "").strip(),
            delivery_notes=str(delivery_notes or "").strip(),
            server=user,
            shift=shift,
            closed_at=now if payment.is_fully_paid else None,
        )

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product=product,
                    quantity=qty,
                    unit_price=product.unit_price,
                    notes=notes,
                )
                for product, qty, notes in lines
            ]
        )

        Payment.objects.bulk_create(
            [
                Payment(order=order, shift=shift, method=leg.method, amount=leg.amount)
                for leg in payment.legs
            ]
        )

        if is_feature_enabled("enable_stock"):
            deduct_stock_for_order(order=order)

        schedule_order_broadcast(order.pk, EVENT_ORDER_CREATED)

    logger.info(
        "ORDER_CREATED",
        extra={
            "order_id": str(order.pk),
            "order_number": order.order_number,
            "sequence_key": order.sequence_key,
            "business_date": order.business_date.isoformat(),
            "channel": channel,
            "payment_status": order.payment_status,
            "total": str(total),
        },
    )
    return order
