# shifts/services/shift_service.py

"""
CASH SHIFT SERVICE

Purpose:
- Open / close a cashier's till session
- Provide the business date orders inherit from the active shift

HARD RULES:
- One open shift per user (DB constraint + explicit check for a clean error)
- A shift's business_date never changes after opening
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone

from orders.services.business_date import get_business_date
from shifts.models import CashShift
from shifts.services.exceptions import (
    NoActiveShiftError,
    ShiftAlreadyOpenError,
    ShiftError,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _to_money(value, *, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ShiftError(f"{field} must be a number")
    try:
        amount = Decimal(str(value)).quantize(TWOPLACES)
    except (InvalidOperation, ValueError) as exc:
        raise ShiftError(f"Invalid {field}: {value!r}") from exc
    if amount < 0:
        raise ShiftError(f"{field} cannot be negative")
    return amount


def get_active_shift(*, user):
    """
    Return the user's open shift, or None.
    """
    if user is None or not getattr(user, "pk", None):
        return None
    return CashShift.objects.filter(user=user, end_time__isnull=True).first()


@transaction.atomic
def open_shift(*, user, starting_cash=Decimal("0.00"), now=None) -> CashShift:
    now = now or timezone.now()
    amount = _to_money(starting_cash, field="starting_cash")

    if CashShift.objects.filter(user=user, end_time__isnull=True).exists():
        raise ShiftAlreadyOpenError("User already has an open cash shift")

    try:
        with transaction.atomic():
            shift = CashShift.objects.create(
                user=user,
                business_date=get_business_date(now),
                start_time=now,
                starting_cash=amount,
            )
    except IntegrityError as exc:
        raise ShiftAlreadyOpenError("User already has an open cash shift") from exc

    logger.info(
        "SHIFT_OPENED",
        extra={
            "shift_id": shift.pk,
            "user_id": user.pk,
            "business_date": shift.business_date.isoformat(),
        },
    )
    return shift


@transaction.atomic
def close_shift(*, user, ending_cash, now=None) -> CashShift:
    now = now or timezone.now()
    amount = _to_money(ending_cash, field="ending_cash")

    shift = (
        CashShift.objects.select_for_update()
        .filter(user=user, end_time__isnull=True)
        .first()
    )
    if shift is None:
        raise NoActiveShiftError("User has no open cash shift")

    shift.end_time = now
    shift.ending_cash = amount
    shift.save(update_fields=["end_time", "ending_cash"])

    logger.info(
        "SHIFT_CLOSED",
        extra={"shift_id": shift.pk, "user_id": user.pk, "ending_cash": str(amount)},
    )
    return shift


def determine_business_date(*, user=None, now=None):
    """
    Business date for an operation by `user`:
    the open shift's date when there is one, else the cutoff rule on `now`.
    """
    shift = get_active_shift(user=user)
    if shift is not None and shift.business_date:
        return shift.business_date
    return get_business_date(now)
