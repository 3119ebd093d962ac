# orders/services/business_date.py

"""
BUSINESS DATE + SEQUENCE KEY RULES

Pure functions. No database access.

Business date:
- The operating "day" for accounting: timestamps before the cutoff hour
  (06:00 local by default) belong to the previous calendar day.
- Aware datetimes are converted to the current Django time zone first;
  naive datetimes are taken as already local.

Sequence keys (order-number shards):
- daily:  YYYYMMDD   from the business date
- hourly: YYYYMMDDHH from the business date + the ORIGINAL hour of the
  timestamp. The hour is never shifted by the cutoff rule:
  2026-01-20 02:30 -> "2026011902" (date rolled back, hour stays 02).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from django.utils import timezone

from orders.conf import orders_setting

GRANULARITY_DAILY = "daily"
GRANULARITY_HOURLY = "hourly"
GRANULARITIES = (GRANULARITY_DAILY, GRANULARITY_HOURLY)


def _local(now: datetime | None) -> datetime:
    if now is None:
        now = timezone.now()
    if timezone.is_aware(now):
        return timezone.localtime(now)
    return now


def _cutoff_hour(cutoff_hour: int | None) -> int:
    hour = orders_setting("BUSINESS_DAY_CUTOFF_HOUR") if cutoff_hour is None else cutoff_hour
    if not 0 <= int(hour) <= 23:
        raise ValueError(f"cutoff hour must be within 0..23, got {hour}")
    return int(hour)


def get_business_date(now: datetime | None = None, *, cutoff_hour: int | None = None) -> date:
    local = _local(now)
    if local.hour < _cutoff_hour(cutoff_hour):
        return local.date() - timedelta(days=1)
    return local.date()


def format_date_key(business_date: date) -> str:
    return business_date.strftime("%Y%m%d")


def get_business_date_key(now: datetime | None = None, *, cutoff_hour: int | None = None) -> str:
    return format_date_key(get_business_date(now, cutoff_hour=cutoff_hour))


def get_business_date_key_hourly(
    now: datetime | None = None, *, cutoff_hour: int | None = None
) -> str:
    local = _local(now)
    business_date = get_business_date(local, cutoff_hour=cutoff_hour)
    return f"{format_date_key(business_date)}{local.hour:02d}"


def get_sequence_key(
    now: datetime | None = None,
    *,
    granularity: str | None = None,
    business_date: date | None = None,
    cutoff_hour: int | None = None,
) -> str:
    """
    Shard key for the configured (or given) granularity.

    An explicit business_date (e.g. inherited from an open cash shift) replaces
    the clock-derived date; the hourly suffix always comes from `now`.
    """
    granularity = (granularity or orders_setting("SEQUENCE_GRANULARITY")).strip().lower()
    local = _local(now)
    if business_date is None:
        business_date = get_business_date(local, cutoff_hour=cutoff_hour)

    if granularity == GRANULARITY_DAILY:
        return format_date_key(business_date)
    if granularity == GRANULARITY_HOURLY:
        return f"{format_date_key(business_date)}{local.hour:02d}"
    raise ValueError(
        f"Unknown sequence granularity '{granularity}'. Expected one of {GRANULARITIES}."
    )


def business_date_from_key(sequence_key: str) -> date:
    """
    Inverse of the key formats (both daily and hourly keys).
    """
    if len(sequence_key) not in (8, 10) or not sequence_key.isdigit():
        raise ValueError(f"Malformed sequence key: {sequence_key!r}")
    return datetime.strptime(sequence_key[:8], "%Y%m%d").date()
