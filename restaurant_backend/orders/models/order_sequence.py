# orders/models/order_sequence.py

from django.core.validators import MinValueValidator
from django.db import models


class OrderSequence(models.Model):
    """
    Durable counter row for one order-number shard.

    sequence_key:
    - "YYYYMMDD"   daily shard (business date)
    - "YYYYMMDDHH" hourly shard (business date + original hour of day)

    RULES:
    - Created on first use with current_value=1
    - Incremented by exactly 1 per order, only through the atomic upsert in
      orders.services.order_number
    - Never decremented; removed only by the purge_order_sequences command
    """

    sequence_key = models.CharField(max_length=12, unique=True)
    current_value = models.PositiveIntegerField(
        default=0, validators=[MinValueValidator(0)]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-sequence_key"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_value__gte=0),
                name="order_sequence_value_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.sequence_key} -> {self.current_value}"
