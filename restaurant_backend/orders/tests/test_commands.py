# orders/tests/test_commands.py

from datetime import date
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from orders.models import OrderSequence
from orders.services.order_creation import create_order
from orders.tests.factories import make_product, make_user, open_shift_for

TODAY = "orders.management.commands.purge_order_sequences.get_business_date"


class PurgeOrderSequencesTests(TestCase):
    def setUp(self):
        for key in ("20251230", "2025123123", "20260101", "2026010105"):
            OrderSequence.objects.create(sequence_key=key, current_value=3)

    def test_deletes_only_older_shards(self):
        out = StringIO()
        call_command("purge_order_sequences", before="20260101", stdout=out)

        self.assertEqual(
            sorted(OrderSequence.objects.values_list("sequence_key", flat=True)),
            ["20260101", "2026010105"],
        )
        self.assertIn("Deleted 2", out.getvalue())

    def test_dry_run_deletes_nothing(self):
        out = StringIO()
        call_command("purge_order_sequences", before="20260101", dry_run=True, stdout=out)

        self.assertEqual(OrderSequence.objects.count(), 4)
        self.assertIn("Would delete 2", out.getvalue())

    def test_rejects_malformed_date(self):
        for before in ("2026-01-01", "2026010105", "20261399"):
            with self.assertRaises(CommandError):
                call_command("purge_order_sequences", before=before)
        self.assertEqual(OrderSequence.objects.count(), 4)

    def test_refuses_dates_after_the_current_business_date(self):
        with mock.patch(TODAY, return_value=date(2026, 1, 1)):
            with self.assertRaises(CommandError):
                call_command("purge_order_sequences", before="20260102")

        self.assertEqual(OrderSequence.objects.count(), 4)

    def test_current_business_date_is_the_latest_allowed_bound(self):
        with mock.patch(TODAY, return_value=date(2026, 1, 1)):
            call_command("purge_order_sequences", before="20260101", stdout=StringIO())

        self.assertEqual(OrderSequence.objects.count(), 2)

    def test_open_shift_keeps_its_business_date_live(self):
        open_shift_for(make_user(), business_date=date(2025, 12, 31))

        with mock.patch(TODAY, return_value=date(2026, 1, 1)):
            with self.assertRaises(CommandError):
                call_command("purge_order_sequences", before="20260101")
            call_command("purge_order_sequences", before="20251231", stdout=StringIO())

        self.assertEqual(
            sorted(OrderSequence.objects.values_list("sequence_key", flat=True)),
            ["2025123123", "20260101", "2026010105"],
        )


class PurgeDuringServiceTests(TestCase):
    """
    A live shard survives a purge, so numbering keeps counting up.
    """

    def setUp(self):
        self.user = make_user()
        open_shift_for(self.user, business_date=date(2026, 1, 19))
        self.product = make_product()

    def test_numbering_continues_after_rejected_purge(self):
        items = [{"product_id": str(self.product.pk), "quantity": 1}]
        first = create_order(user=self.user, items=items)

        with mock.patch(TODAY, return_value=date(2026, 1, 19)):
            with self.assertRaises(CommandError):
                call_command("purge_order_sequences", before="20260120")

        second = create_order(user=self.user, items=items)

        self.assertEqual((first.order_number, second.order_number), (1, 2))
        self.assertEqual(OrderSequence.objects.get(sequence_key="20260119").current_value, 2)
