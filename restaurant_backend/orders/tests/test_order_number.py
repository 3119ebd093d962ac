# orders/tests/test_order_number.py

import threading
from datetime import date, datetime
from unittest import mock, skipUnless

from django.db import DatabaseError, IntegrityError, OperationalError, connection, transaction
from django.test import TestCase, TransactionTestCase, override_settings

from orders.models import OrderSequence
from orders.services import order_number as order_number_service
from orders.services.exceptions import OrderNumberGenerationError
from orders.services.order_number import (
    OrderIdentifier,
    next_order_number,
    next_sequence_value,
)

NOON = datetime(2026, 1, 19, 12, 0)


class OrderNumberGeneratorTests(TestCase):
    """
    GUARANTEES:
    - First call on a new shard returns 1, then strictly +1 per call
    - Different shards count independently
    - Generation outside a transaction is refused
    - Transient failures are retried; persistent ones abort with a clear error
    """

    def test_first_number_of_new_day_is_one(self):
        with transaction.atomic():
            ident = next_order_number(now=NOON)

        self.assertEqual(
            ident,
            OrderIdentifier(order_number=1, business_date=date(2026, 1, 19), sequence_key="20260119"),
        )
        self.assertEqual(OrderSequence.objects.get(sequence_key="20260119").current_value, 1)

    def test_sequential_calls_yield_contiguous_values(self):
        OrderSequence.objects.create(sequence_key="20260119", current_value=41)

        with transaction.atomic():
            numbers = [next_order_number(now=NOON).order_number for _ in range(5)]

        self.assertEqual(numbers, [42, 43, 44, 45, 46])

    def test_shards_are_independent(self):
        with transaction.atomic():
            a1 = next_order_number(now=datetime(2026, 1, 19, 12, 0))
            b1 = next_order_number(now=datetime(2026, 1, 20, 12, 0))
            a2 = next_order_number(now=datetime(2026, 1, 19, 18, 0))

        self.assertEqual((a1.order_number, b1.order_number, a2.order_number), (1, 1, 2))

    def test_early_morning_counts_towards_previous_business_day(self):
        with transaction.atomic():
            late = next_order_number(now=datetime(2026, 1, 19, 23, 0))
            after_midnight = next_order_number(now=datetime(2026, 1, 20, 2, 30))

        self.assertEqual(after_midnight.business_date, date(2026, 1, 19))
        self.assertEqual(after_midnight.sequence_key, "20260119")
        self.assertEqual(after_midnight.order_number, late.order_number + 1)

    @override_settings(ORDERS={"SEQUENCE_GRANULARITY": "hourly"})
    def test_hourly_sharding_uses_hour_key(self):
        with transaction.atomic():
            first = next_order_number(now=datetime(2026, 1, 19, 14, 5))
            second = next_order_number(now=datetime(2026, 1, 19, 14, 55))
            next_hour = next_order_number(now=datetime(2026, 1, 19, 15, 0))

        self.assertEqual(first.sequence_key, "2026011914")
        self.assertEqual((first.order_number, second.order_number), (1, 2))
        self.assertEqual((next_hour.sequence_key, next_hour.order_number), ("2026011915", 1))

    def test_explicit_business_date_is_returned_unchanged(self):
        with transaction.atomic():
            ident = next_order_number(now=datetime(2026, 1, 20, 9, 0), business_date=date(2026, 1, 19))

        self.assertEqual(ident.business_date, date(2026, 1, 19))
        self.assertEqual(ident.sequence_key, "20260119")

    def test_refuses_to_run_outside_transaction(self):
        # TestCase wraps each test in atomic(); leave it for this call only.
        with mock.patch(
            "orders.services.order_number.transaction.get_connection"
        ) as get_conn:
            get_conn.return_value.in_atomic_block = False
            with self.assertRaises(OrderNumberGenerationError) as ctx:
                next_sequence_value("20260119")

        self.assertEqual(ctx.exception.code, "TRANSACTION_REQUIRED")
        self.assertFalse(OrderSequence.objects.filter(sequence_key="20260119").exists())

    def test_transient_failure_falls_back_to_orm_path(self):
        OrderSequence.objects.create(sequence_key="20260119", current_value=7)

        with mock.patch(
            "orders.services.order_number._upsert_native",
            side_effect=OperationalError("deadlock detected"),
        ), mock.patch(
            "orders.services.order_number._supports_native_upsert", return_value=True
        ), self.assertLogs("orders", level="WARNING") as logs:
            with transaction.atomic():
                value = next_sequence_value("20260119")

        self.assertEqual(value, 8)
        self.assertTrue(any("ORDER_SEQUENCE_GENERATION_RETRY" in line for line in logs.output))

    def test_exhausted_retries_raise_generation_error(self):
        with mock.patch(
            "orders.services.order_number._upsert_native",
            side_effect=IntegrityError("duplicate key"),
        ), mock.patch(
            "orders.services.order_number._upsert_orm",
            side_effect=IntegrityError("duplicate key"),
        ), self.assertLogs("orders", level="WARNING"):
            with self.assertRaises(OrderNumberGenerationError) as ctx:
                with transaction.atomic():
                    next_order_number(now=NOON)

        self.assertEqual(ctx.exception.code, "SEQUENCE_GENERATION_FAILED")
        self.assertEqual(ctx.exception.context["sequence_key"], "20260119")

    @override_settings(ORDERS={"SEQUENCE_MAX_ATTEMPTS": 3})
    def test_retry_budget_is_configurable(self):
        calls = []

        def flaky(sequence_key, now):
            calls.append(sequence_key)
            if len(calls) < 3:
                raise OperationalError("lock wait timeout")
            return 1

        with mock.patch("orders.services.order_number._upsert_native", side_effect=flaky), mock.patch(
            "orders.services.order_number._upsert_orm", side_effect=flaky
        ), self.assertLogs("orders", level="WARNING"):
            with transaction.atomic():
                value = next_sequence_value("20260119")

        self.assertEqual(value, 1)
        self.assertEqual(len(calls), 3)

    def test_non_retryable_database_error_is_not_retried(self):
        orm = mock.Mock(side_effect=DatabaseError("relation does not exist"))
        with mock.patch("orders.services.order_number._upsert_native", orm), mock.patch(
            "orders.services.order_number._upsert_orm", orm
        ), self.assertLogs("orders", level="ERROR"):
            with self.assertRaises(OrderNumberGenerationError) as ctx:
                with transaction.atomic():
                    next_order_number(now=NOON)

        self.assertEqual(ctx.exception.code, "SEQUENCE_GENERATION_NON_RETRYABLE")
        self.assertEqual(orm.call_count, 1)

    def test_rollback_of_caller_discards_increment(self):
        OrderSequence.objects.create(sequence_key="20260119", current_value=3)

        with self.assertRaises(RuntimeError):
            with transaction.atomic():
                next_order_number(now=NOON)
                raise RuntimeError("order insert failed")

        self.assertEqual(OrderSequence.objects.get(sequence_key="20260119").current_value, 3)

    @override_settings(ORDERS={"MAX_EXPECTED_ORDER_NUMBER": 5})
    def test_warns_when_number_exceeds_expected_range(self):
        OrderSequence.objects.create(sequence_key="20260119", current_value=5)

        with self.assertLogs("orders", level="WARNING") as logs, transaction.atomic():
            ident = next_order_number(now=NOON)

        self.assertEqual(ident.order_number, 6)
        self.assertTrue(any("ORDER_NUMBER_EXCEEDS_EXPECTED_RANGE" in line for line in logs.output))



class SeededShardTests(TestCase):
    """
    Two orders drawn from a shard at 5 get 6 and 7, on either upsert path.
    """

    def setUp(self):
        OrderSequence.objects.create(sequence_key="20260119", current_value=5)

    def _draw_two(self):
        numbers = set()
        for _ in range(2):
            with transaction.atomic():
                numbers.add(next_order_number(now=NOON).order_number)
        return numbers

    def test_native_upsert_path(self):
        if not order_number_service._supports_native_upsert():
            self.skipTest(f"{connection.vendor} has no INSERT ... RETURNING")

        with mock.patch(
            "orders.services.order_number._upsert_native",
            wraps=order_number_service._upsert_native,
        ) as native:
            numbers = self._draw_two()

        self.assertEqual(numbers, {6, 7})
        self.assertEqual(native.call_count, 2)
        self.assertEqual(OrderSequence.objects.get(sequence_key="20260119").current_value, 7)

    def test_orm_path(self):
        with mock.patch(
            "orders.services.order_number._supports_native_upsert", return_value=False
        ):
            numbers = self._draw_two()

        self.assertEqual(numbers, {6, 7})
        self.assertEqual(OrderSequence.objects.get(sequence_key="20260119").current_value, 7)


@skipUnless(connection.vendor == "postgresql", "needs real row-level locking")
class ConcurrentOrderNumberTests(TransactionTestCase):
    """
    N concurrent generators starting from v must produce exactly {v+1..v+N}.
    """

    WORKERS = 12

    def test_concurrent_calls_produce_contiguous_unique_values(self):
        OrderSequence.objects.create(sequence_key="20260119", current_value=100)

        results = []
        errors = []
        lock = threading.Lock()
        barrier = threading.Barrier(self.WORKERS)

        def worker():
            from django.db import connections

            try:
                barrier.wait()
                with transaction.atomic():
                    value = next_order_number(now=NOON).order_number
                with lock:
                    results.append(value)
            except Exception as exc:  # collected and asserted below
                with lock:
                    errors.append(exc)
            finally:
                connections.close_all()

        threads = [threading.Thread(target=worker) for _ in range(self.WORKERS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(sorted(results), list(range(101, 101 + self.WORKERS)))
