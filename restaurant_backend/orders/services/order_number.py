# orders/services/order_number.py

"""
ORDER NUMBER GENERATOR

Purpose:
- Draw a human-readable, sequential order number from a sharded counter row
  (OrderSequence) without serializing unrelated order creation.

Sharding:
- daily  -> one counter per business date   ("20260119")
- hourly -> one counter per business hour   ("2026011914")
  Different shards never contend; within a shard the database linearizes.

HARD RULES:
- The caller owns the transaction. next_order_number() refuses to run
  outside transaction.atomic(); the number and the order row commit or
  roll back together. Only savepoints are opened here.
- The counter is changed by ONE atomic statement (insert-or-increment),
  never a read-then-write pair at the application layer.
- Transient failures (insert race, deadlock, lock timeout) are retried via the
  ORM increment path inside a fresh savepoint. A persistent failure raises
  OrderNumberGenerationError, which aborts the enclosing order creation.

Not guaranteed:
- Uniqueness across shards. (sequence_key, order_number) is the identity.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime

from django.db import (
    DatabaseError,
    IntegrityError,
    OperationalError,
    connection,
    transaction,
)
from django.db.models import F
from django.utils import timezone

from orders.conf import orders_setting
from orders.models import OrderSequence
from orders.services.business_date import get_business_date, get_sequence_key
from orders.services.exceptions import OrderNumberGenerationError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (IntegrityError, OperationalError)


@dataclass(frozen=True)
class OrderIdentifier:
    order_number: int
    business_date: date
    sequence_key: str


# ============================================================
# ATOMIC UPSERT STRATEGIES
# ============================================================

def _supports_native_upsert() -> bool:
    return connection.vendor in ("postgresql", "sqlite") and bool(
        connection.features.can_return_columns_from_insert
    )


def _upsert_native(sequence_key: str, now: datetime) -> int:
    """
    Single statement: INSERT ... ON CONFLICT DO UPDATE ... RETURNING.
    """
    qn = connection.ops.quote_name
    table = qn(OrderSequence._meta.db_table)
    stamp = connection.ops.adapt_datetimefield_value(now)

    sql = (
        f"INSERT INTO {table} "
        f"({qn('sequence_key')}, {qn('current_value')}, {qn('created_at')}, {qn('updated_at')}) "
        f"VALUES (%s, 1, %s, %s) "
        f"ON CONFLICT ({qn('sequence_key')}) DO UPDATE SET "
        f"{qn('current_value')} = {table}.{qn('current_value')} + 1, "
        f"{qn('updated_at')} = EXCLUDED.{qn('updated_at')} "
        f"RETURNING {qn('current_value')}"
    )

    with connection.cursor() as cursor:
        cursor.execute(sql, [sequence_key, stamp, stamp])
        row = cursor.fetchone()

    if not row or row[0] is None:
        raise OrderNumberGenerationError(
            "Sequence upsert returned no value",
            code="SEQUENCE_DATA_MALFORMED",
            context={"sequence_key": sequence_key},
        )
    return int(row[0])


def _upsert_orm(sequence_key: str, now: datetime) -> int:
    """
    ORM equivalent: atomic UPDATE ... SET current_value = current_value + 1,
    or INSERT value 1 when the shard does not exist yet.

    After the UPDATE this transaction holds the row lock, so reading the
    value back cannot observe another writer's increment.
    """
    updated = OrderSequence.objects.filter(sequence_key=sequence_key).update(
        current_value=F("current_value") + 1,
        updated_at=now,
    )
    if updated:
        return (
            OrderSequence.objects.filter(sequence_key=sequence_key)
            .values_list("current_value", flat=True)
            .get()
        )

    # A concurrent first insert for the same shard surfaces as IntegrityError.
    with transaction.atomic():
        OrderSequence.objects.create(sequence_key=sequence_key, current_value=1)
    return 1


def _strategy_for_attempt(attempt: int):
    if attempt == 1 and _supports_native_upsert():
        return "native", _upsert_native
    return "orm", _upsert_orm


def _require_transaction() -> None:
    if not transaction.get_connection().in_atomic_block:
        raise OrderNumberGenerationError(
            "Order numbers must be drawn inside the caller's order-creation transaction",
            code="TRANSACTION_REQUIRED",
        )


# ============================================================
# PUBLIC API
# ============================================================

def next_sequence_value(sequence_key: str, *, now: datetime | None = None) -> int:
    """
    Atomically insert-or-increment the counter for `sequence_key` and return
    the new value.
    """
    _require_transaction()

    now = now or timezone.now()
    max_attempts = max(1, int(orders_setting("SEQUENCE_MAX_ATTEMPTS")))
    last_error = None

    for attempt in range(1, max_attempts + 1):
        strategy_name, strategy = _strategy_for_attempt(attempt)
        try:
            with transaction.atomic():
                value = strategy(sequence_key, now)
        except RETRYABLE_ERRORS as exc:
            last_error = exc
            logger.warning(
                "ORDER_SEQUENCE_GENERATION_RETRY",
                extra={
                    "sequence_key": sequence_key,
                    "attempt": attempt,
                    "max_attempts": max_attempts,
                    "strategy": strategy_name,
                    "error": str(exc),
                    "will_retry": attempt < max_attempts,
                },
            )
            continue
        except DatabaseError as exc:
            raise OrderNumberGenerationError(
                f"Non-retryable error during sequence generation: {exc}",
                code="SEQUENCE_GENERATION_NON_RETRYABLE",
                context={"sequence_key": sequence_key, "attempt": attempt},
            ) from exc

        if value == 1:
            logger.info(
                "NEW_SEQUENCE_CREATED",
                extra={"sequence_key": sequence_key, "strategy": strategy_name},
            )
        return value

    logger.error(
        "ORDER_SEQUENCE_GENERATION_EXHAUSTED_RETRIES",
        extra={
            "sequence_key": sequence_key,
            "attempts": max_attempts,
            "last_error": str(last_error),
        },
    )
    raise OrderNumberGenerationError(
        f"Failed to generate order number after {max_attempts} attempts: {last_error}",
        code="SEQUENCE_GENERATION_FAILED",
        context={"sequence_key": sequence_key, "attempts": max_attempts},
    ) from last_error


def next_order_number(
    *,
    now: datetime | None = None,
    business_date: date | None = None,
    granularity: str | None = None,
) -> OrderIdentifier:
    """
    Draw the next order number for the shard that `now` falls into.

    The business date is computed ONCE here and returned, so the caller
    persists exactly the date the shard key was derived from.

    Usage:
        with transaction.atomic():
            ident = next_order_number()
            Order.objects.create(
                order_number=ident.order_number,
                business_date=ident.business_date,
                sequence_key=ident.sequence_key,
                ...
            )
    """
    started = time.monotonic()
    now = now or timezone.now()

    if business_date is None:
        business_date = get_business_date(now)
    sequence_key = get_sequence_key(
        now, granularity=granularity, business_date=business_date
    )

    try:
        order_number = next_sequence_value(sequence_key)
    except OrderNumberGenerationError as exc:
        logger.error(
            "ORDER_NUMBER_GENERATION_FAILED",
            extra={"sequence_key": sequence_key, "code": exc.code, "error": str(exc)},
        )
        raise

    elapsed_ms = int((time.monotonic() - started) * 1000)

    max_expected = int(orders_setting("MAX_EXPECTED_ORDER_NUMBER"))
    if order_number > max_expected:
        logger.warning(
            "ORDER_NUMBER_EXCEEDS_EXPECTED_RANGE",
            extra={
                "sequence_key": sequence_key,
                "order_number": order_number,
                "max_expected": max_expected,
            },
        )

    if elapsed_ms > int(orders_setting("SLOW_GENERATION_MS")):
        logger.warning(
            "ORDER_NUMBER_GENERATION_SLOW",
            extra={"sequence_key": sequence_key, "generation_ms": elapsed_ms},
        )

    logger.info(
        "ORDER_NUMBER_GENERATED",
        extra={
            "order_number": order_number,
            "business_date": business_date.isoformat(),
            "sequence_key": sequence_key,
            "generation_ms": elapsed_ms,
        },
    )

    return OrderIdentifier(
        order_number=order_number,
        business_date=business_date,
        sequence_key=sequence_key,
    )
