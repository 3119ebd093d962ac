# orders/services/order_status.py

"""
ORDER STATUS MACHINE

Purpose:
- Single source of truth for order status transitions
- The ONLY write path for Order.status / Order.closed_at after creation

POLICY:
- Lenient by default: a transition outside the table is logged as a warning
  and applied anyway (floor staff must be able to correct mistakes).
- ORDERS["STRICT_STATUS_TRANSITIONS"] = True rejects it with
  InvalidTransitionError and leaves the order untouched.

SIDE EFFECTS:
- DELIVERED / CANCELLED set closed_at; reopening clears it
- PREPARED marks every unfinished item READY
- The committed order is pushed to the kitchen display after commit
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from kds.services import EVENT_ORDER_UPDATED, schedule_order_broadcast
from orders.conf import orders_setting
from orders.models import Order, OrderItem
from orders.services.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)

logger = logging.getLogger(__name__)

S = Order.Status

# ============================================================
# STATE DEFINITIONS
# ============================================================

TRANSITIONS = {
    S.OPEN: frozenset({S.CONFIRMED, S.IN_PREPARATION, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.OPEN, S.IN_PREPARATION, S.CANCELLED}),
    S.IN_PREPARATION: frozenset({S.OPEN, S.PREPARED, S.CANCELLED}),
    S.PREPARED: frozenset({S.OPEN, S.IN_PREPARATION, S.ON_ROUTE, S.DELIVERED, S.CANCELLED}),
    S.ON_ROUTE: frozenset({S.DELIVERED, S.CANCELLED}),
    S.DELIVERED: frozenset({S.OPEN}),
    S.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({S.DELIVERED, S.CANCELLED})


# ============================================================
# DOMAIN RULES (pure)
# ============================================================

def allowed_transitions(from_status: str) -> frozenset:
    return TRANSITIONS.get(from_status, frozenset())


def is_valid_transition(from_status: str, to_status: str) -> bool:
    return to_status in allowed_transitions(from_status)


def strict_transitions_enabled() -> bool:
    return bool(orders_setting("STRICT_STATUS_TRANSITIONS"))


# ============================================================
# WRITE PATH
# ============================================================

def _lock_order(order_id) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise OrderNotFoundError("Order") from exc


def update_status(*, order_id, target_status) -> Order:
    """
    Move an order to `target_status`.

    Raises:
    - OrderValidationError: unknown target status
    - OrderNotFoundError: no such order
    - InvalidTransitionError: transition outside the table, strict mode only
    """
    if target_status not in S.values:
        raise OrderValidationError(f"Invalid status: {target_status}")
    target_status = S(target_status)

    with transaction.atomic():
        order = _lock_order(order_id)
        current = order.status

        if not is_valid_transition(current, target_status):
            allowed = allowed_transitions(current)
            if strict_transitions_enabled():
                logger.warning(
                    "ORDER_STATUS_TRANSITION_REJECTED",
                    extra={
                        "order_id": str(order.pk),
                        "from_status": current,
                        "to_status": target_status,
                    },
                )
                raise InvalidTransitionError(
                    from_status=current, to_status=target_status, allowed=allowed
                )

            logger.warning(
                "INVALID_STATUS_TRANSITION_ALLOWED",
                extra={
                    "order_id": str(order.pk),
                    "order_number": order.order_number,
                    "from_status": current,
                    "to_status": target_status,
                    "allowed": sorted(allowed),
                },
            )

        update_fields = ["status", "updated_at"]
        order.status = target_status

        if target_status in TERMINAL_STATUSES:
            order.closed_at = timezone.now()
            update_fields.append("closed_at")
        elif target_status == S.OPEN and order.closed_at is not None:
            order.closed_at = None
            update_fields.append("closed_at")

        order.save(update_fields=update_fields)

        if target_status == S.PREPARED:
            ready = (
                OrderItem.objects.filter(order=order)
                .exclude(status__in=[OrderItem.Status.SERVED, OrderItem.Status.READY])
                .update(status=OrderItem.Status.READY)
            )
            logger.debug(
                "ORDER_ITEMS_MARKED_READY",
                extra={"order_id": str(order.pk), "items": ready},
            )

        schedule_order_broadcast(order.pk, EVENT_ORDER_UPDATED)

    logger.info(
        "ORDER_STATUS_UPDATED",
        extra={
            "order_id": str(order.pk),
            "from_status": current,
            "to_status": target_status,
        },
    )
    return order
