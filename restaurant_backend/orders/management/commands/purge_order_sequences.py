# orders/management/commands/purge_order_sequences.py

"""
Delete OrderSequence shards older than a business date.

Counter rows are only needed while their shard can still issue numbers.
Old shards are safe to drop: orders keep their own number + sequence_key.

A shard that can still issue numbers is never purged: --before may not be
later than the current business date, nor than the business date of any
open cash shift (orders inherit the shift's date).

Usage:
    python manage.py purge_order_sequences --before 20260101
    python manage.py purge_order_sequences --before 20260101 --dry-run
"""

import logging

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.db.models import Min

from orders.models import OrderSequence
from orders.services.business_date import (
    business_date_from_key,
    format_date_key,
    get_business_date,
)
from shifts.models import CashShift

logger = logging.getLogger(__name__)


def _live_business_date():
    """
    Earliest business date that may still draw order numbers.
    """
    live = get_business_date()
    oldest_open = CashShift.objects.filter(end_time__isnull=True).aggregate(
        oldest=Min("business_date")
    )["oldest"]
    if oldest_open is not None and oldest_open < live:
        return oldest_open
    return live


class Command(BaseCommand):
    help = "Delete order-number sequence shards whose business date is before --before (YYYYMMDD)"

    def add_arguments(self, parser):
        parser.add_argument("--before", required=True, help="Business date key YYYYMMDD (exclusive)")
        parser.add_argument("--dry-run", action="store_true", help="Only report what would be deleted")

    def handle(self, *args, **options):
        before = (options["before"] or "").strip()
        if len(before) != 8:
            raise CommandError("--before must be a YYYYMMDD date key")
        try:
            before_date = business_date_from_key(before)
        except ValueError as exc:
            raise CommandError("--before must be a YYYYMMDD date key") from exc

        live = _live_business_date()
        if before_date > live:
            raise CommandError(
                f"--before {before} would purge live shards; "
                f"latest allowed is {format_date_key(live)}"
            )

        # Hourly keys (YYYYMMDDHH) compare correctly on their date prefix.
        stale = OrderSequence.objects.filter(sequence_key__lt=before)
        count = stale.count()

        if options["dry_run"]:
            self.stdout.write(f"Would delete {count} sequence shard(s) before {before}")
            return

        with transaction.atomic():
            deleted, _ = stale.delete()

        logger.info("ORDER_SEQUENCES_PURGED", extra={"before": before, "deleted": deleted})
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} sequence shard(s) before {before}"))
