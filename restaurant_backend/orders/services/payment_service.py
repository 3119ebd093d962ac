# orders/services/payment_service.py

"""
ORDER PAYMENT PROCESSING

Pure computation of the payment legs for a new order. Persisting the
Payment rows is the caller's job (order creation), inside its transaction.

Rules:
- single method  -> one leg for the full order total
- split          -> one leg per entry, amounts must be > 0; the split may
                    overpay by at most 10% of the total (cash rounding / tips)
- no payment     -> nothing recorded, order stays PENDING
- PAID if paid >= total, PARTIAL if 0 < paid < total, PENDING otherwise
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from orders.models import Order, Payment
from orders.services.exceptions import OrderValidationError

TWOPLACES = Decimal("0.01")
OVERPAYMENT_TOLERANCE = Decimal("0.10")


def _money(value) -> Decimal:
    if isinstance(value, bool):
        raise OrderValidationError("Payment amount must be a number")
    try:
        return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise OrderValidationError(f"Invalid payment amount: {value!r}") from exc


def _method(value) -> str:
    method = str(value or "").strip().upper()
    if method not in Payment.Method.values:
        raise OrderValidationError(f"Invalid payment method: {value}")
    return method


@dataclass(frozen=True)
class PaymentLeg:
    method: str
    amount: Decimal


@dataclass(frozen=True)
class PaymentResult:
    payment_status: str
    paid_amount: Decimal
    legs: tuple = field(default_factory=tuple)
    shift: object = None

    @property
    def is_fully_paid(self) -> bool:
        return self.payment_status == Order.PaymentStatus.PAID


def validate_payment_amounts(split, order_total) -> list:
    """
    Normalise and validate split payment entries ({"method", "amount"}).

    Returns a list of PaymentLeg. Raises OrderValidationError.
    """
    total = _money(order_total)
    legs = []
    for entry in split or []:
        if not isinstance(entry, dict):
            raise OrderValidationError("Each split payment must be an object")
        amount = _money(entry.get("amount"))
        if amount <= 0:
            raise OrderValidationError("Split payment amounts must be greater than zero")
        legs.append(PaymentLeg(method=_method(entry.get("method")), amount=amount))

    paid = sum((leg.amount for leg in legs), Decimal("0.00"))
    ceiling = (total * (1 + OVERPAYMENT_TOLERANCE)).quantize(TWOPLACES)
    if total > 0 and paid > ceiling:
        raise OrderValidationError(
            f"Split payments ({paid}) exceed the order total ({total}) by more than 10%"
        )
    return legs


def payment_status_for(*, paid, total) -> str:
    if paid > 0 and paid >= total:
        return Order.PaymentStatus.PAID
    if paid > 0:
        return Order.PaymentStatus.PARTIAL
    return Order.PaymentStatus.PENDING


def process_payments(*, order_total, shift=None, method=None, split=None) -> PaymentResult:
    total = _money(order_total)

    if split:
        legs = validate_payment_amounts(split, total)
    elif method:
        legs = [PaymentLeg(method=_method(method), amount=total)] if total > 0 else []
    else:
        legs = []

    paid = sum((leg.amount for leg in legs), Decimal("0.00"))
    return PaymentResult(
        payment_status=payment_status_for(paid=paid, total=total),
        paid_amount=paid,
        legs=tuple(legs),
        shift=shift,
    )
