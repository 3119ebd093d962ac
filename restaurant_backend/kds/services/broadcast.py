# kds/services/broadcast.py

"""
KDS BROADCAST (POST-COMMIT FAN-OUT)

Purpose:
- Publish the full order state (items + products) to kitchen display clients.

Rules:
- Best-effort, at-most-once. Nothing waits for an acknowledgement.
- A failed publish is logged and swallowed; it never fails or rolls back the
  mutation that triggered it.
- Mutating services do not publish inline: they call schedule_order_broadcast(),
  which registers a transaction.on_commit hook. Rolled-back mutations
  therefore never reach the kitchen.
"""

from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from features.services import is_feature_enabled
from kds.consumers import kds_group_name

logger = logging.getLogger(__name__)

EVENT_ORDER_CREATED = "order.created"
EVENT_ORDER_UPDATED = "order.updated"


def _serialize(order) -> dict:
    from orders.serializers import OrderSerializer

    return OrderSerializer(order).data


def _publish(order, event: str) -> bool:
    try:
        if not is_feature_enabled("enable_kds"):
            logger.debug("KDS_DISABLED_SKIP", extra={"order_id": str(order.pk), "event": event})
            return False

        layer = get_channel_layer()
        if layer is None:
            logger.debug("KDS_NO_CHANNEL_LAYER", extra={"order_id": str(order.pk)})
            return False

        payload = _serialize(order)
        async_to_sync(layer.group_send)(
            kds_group_name(),
            {"type": "order.event", "event": event, "order": payload},
        )
    except Exception:
        logger.exception(
            "KDS_BROADCAST_FAILED",
            extra={"order_id": str(getattr(order, "pk", "")), "event": event},
        )
        return False

    logger.debug("KDS_BROADCAST_SENT", extra={"order_id": str(order.pk), "event": event})
    return True


def broadcast_order_update(order) -> bool:
    return _publish(order, EVENT_ORDER_UPDATED)


def broadcast_new_order(order) -> bool:
    return _publish(order, EVENT_ORDER_CREATED)


def _load_order(order_id):
    from orders.models import Order

    return (
        Order.objects.select_related("server")
        .prefetch_related("items__product", "payments")
        .filter(pk=order_id)
        .first()
    )


def _send_after_commit(order_id, event: str) -> None:
    try:
        order = _load_order(order_id)
    except Exception:
        logger.exception("KDS_BROADCAST_LOAD_FAILED", extra={"order_id": str(order_id)})
        return

    if order is None:
        logger.warning("KDS_BROADCAST_ORDER_GONE", extra={"order_id": str(order_id)})
        return

    _publish(order, event)


def schedule_order_broadcast(order_id, event: str = EVENT_ORDER_UPDATED) -> None:
    """
    Publish the committed state of `order_id` once the current transaction
    commits (immediately when called outside a transaction).
    """
    transaction.on_commit(lambda: _send_after_commit(order_id, event))
