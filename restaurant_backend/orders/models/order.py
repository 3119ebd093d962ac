# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Order(models.Model):
    """
    A restaurant order (POS counter, table, takeaway or delivery).

    IDENTITY:
    - id is the technical primary key (UUID)
    - order_number is the human-readable display number, unique only within
      its sequence_key (one business day, or one business hour when hourly
      sharding is enabled). (sequence_key, order_number) is the true identity.

    LIFECYCLE:
    - order_number, sequence_key and business_date are assigned once at creation
    - after creation, status / closed_at are mutated only by
      orders.services.order_status
    """

    class Status(models.TextChoices):
        OPEN = "OPEN", "Open"
        CONFIRMED = "CONFIRMED", "Confirmed"
        IN_PREPARATION = "IN_PREPARATION", "In preparation"
        PREPARED = "PREPARED", "Prepared"
        ON_ROUTE = "ON_ROUTE", "On route"
        DELIVERED = "DELIVERED", "Delivered"
        CANCELLED = "CANCELLED", "Cancelled"

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", "Pending"
        PARTIAL = "PARTIAL", "Partially paid"
        PAID = "PAID", "Paid"

    class Channel(models.TextChoices):
        POS = "POS", "Counter"
        TABLE = "TABLE", "Table"
        TAKEAWAY = "TAKEAWAY", "Takeaway"
        DELIVERY = "DELIVERY", "Delivery"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.PositiveIntegerField(
        help_text="Display number, sequential within its sequence_key",
    )
    sequence_key = models.CharField(
        max_length=12,
        help_text="Shard key the order number was drawn from (YYYYMMDD or YYYYMMDDHH)",
    )
    business_date = models.DateField(
        help_text="Operational day (6 AM cutoff), used for accounting grouping",
    )

    channel = models.CharField(
        max_length=16, choices=Channel.choices, default=Channel.POS
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.OPEN
    )
    payment_status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    subtotal_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    customer_name = models.CharField(max_length=120, blank=True, default="")
    customer_phone = models.CharField(max_length=40, blank=True, default="")
    delivery_address = models.CharField(max_length=255, blank=True, default="")
    delivery_notes = models.CharField(max_length=255, blank=True, default="")

    server = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="served_orders",
        help_text="Waiter / cashier who took the order",
    )
    shift = models.ForeignKey(
        "shifts.CashShift",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
    )

    closed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["sequence_key", "order_number"],
                name="unique_order_number_per_sequence",
            ),
        ]
        indexes = [
            models.Index(fields=["business_date", "order_number"], name="order_bizdate_number"),
            models.Index(fields=["status"], name="order_status"),
            models.Index(fields=["business_date", "status"], name="order_bizdate_status"),
        ]

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None

    def __str__(self):
        return f"#{self.order_number} ({self.business_date}) | {self.status}"
