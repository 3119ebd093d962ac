# orders/services/order_kitchen.py

"""
KITCHEN OPERATIONS

- mark_all_served: bulk-serve every item of an order (idempotent)
- update_item_status: move a single line through PENDING -> COOKING -> READY -> SERVED
- active_kitchen_orders: what the kitchen screen shows for the business day

Item moves follow the same lenient / strict policy as order statuses:
skipping forward is always fine, moving backwards is warned (lenient) or
rejected (strict).
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Prefetch

from kds.services import EVENT_ORDER_UPDATED, schedule_order_broadcast
from orders.models import Order, OrderItem
from orders.services.business_date import get_business_date
from orders.services.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from orders.services.order_status import strict_transitions_enabled

logger = logging.getLogger(__name__)

ITEM_ORDER = (
    OrderItem.Status.PENDING,
    OrderItem.Status.COOKING,
    OrderItem.Status.READY,
    OrderItem.Status.SERVED,
)

KITCHEN_STATUSES = (
    Order.Status.OPEN,
    Order.Status.CONFIRMED,
    Order.Status.IN_PREPARATION,
    Order.Status.PREPARED,
)


def allowed_item_transitions(from_status: str) -> frozenset:
    if from_status not in ITEM_ORDER:
        return frozenset()
    return frozenset(ITEM_ORDER[ITEM_ORDER.index(from_status) + 1:])


def mark_all_served(*, order_id) -> Order:
    with transaction.atomic():
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, ValueError, DjangoValidationError) as exc:
            raise OrderNotFoundError("Order") from exc

        served = (
            OrderItem.objects.filter(order=order)
            .exclude(status=OrderItem.Status.SERVED)
            .update(status=OrderItem.Status.SERVED)
        )
        schedule_order_broadcast(order.pk, EVENT_ORDER_UPDATED)

    logger.info(
        "ORDER_ITEMS_SERVED",
        extra={"order_id": str(order.pk), "items": served},
    )
    return order


def update_item_status(*, item_id, target_status) -> OrderItem:
    if target_status not in OrderItem.Status.values:
        raise OrderValidationError(f"Invalid item status: {target_status}")
    target_status = OrderItem.Status(target_status)

    with transaction.atomic():
        try:
            item = OrderItem.objects.select_for_update().get(pk=item_id)
        except (OrderItem.DoesNotExist, ValueError, DjangoValidationError) as exc:
            raise OrderNotFoundError("Order item") from exc

        current = item.status
        allowed = allowed_item_transitions(current)

        if target_status not in allowed:
            if strict_transitions_enabled():
                raise InvalidTransitionError(
                    from_status=current, to_status=target_status, allowed=allowed
                )
            logger.warning(
                "INVALID_ITEM_TRANSITION_ALLOWED",
                extra={
                    "item_id": item.pk,
                    "order_id": str(item.order_id),
                    "from_status": current,
                    "to_status": target_status,
                },
            )

        item.status = target_status
        item.save(update_fields=["status"])

        schedule_order_broadcast(item.order_id, EVENT_ORDER_UPDATED)

    return item


def active_kitchen_orders(*, business_date=None):
    """
    Orders the kitchen still has to work on, oldest first, with the
    not-yet-served items prefetched as `kitchen_items`.
    """
    business_date = business_date or get_business_date()
    pending_items = (
        OrderItem.objects.exclude(status=OrderItem.Status.SERVED)
        .select_related("product")
        .order_by("created_at", "id")
    )
    return (
        Order.objects.filter(business_date=business_date, status__in=KITCHEN_STATUSES)
        .order_by("created_at", "order_number")
        .prefetch_related(Prefetch("items", queryset=pending_items, to_attr="kitchen_items"))
    )
