# orders/models/order_item.py

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class OrderItem(models.Model):
    """
    Order line. Status moves PENDING -> COOKING -> READY -> SERVED,
    independently per item; bulk moves go through orders.services.
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        COOKING = "COOKING", "Cooking"
        READY = "READY", "Ready"
        SERVED = "SERVED", "Served"

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Product price snapshot at order time",
    )
    notes = models.CharField(max_length=255, blank=True, default="")

    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["order", "status"], name="orderitem_order_status"),
        ]

    @property
    def line_total(self) -> Decimal:
        return (Decimal(self.quantity) * Decimal(self.unit_price)).quantize(
            Decimal("0.01")
        )

    def __str__(self):
        return f"{self.product} x{self.quantity} [{self.status}]"
