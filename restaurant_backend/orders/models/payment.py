# orders/models/payment.py

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Payment(models.Model):
    """
    One payment leg of an order (split payments create several rows).
    Attributed to the cash shift that was open when the order was taken.
    """

    class Method(models.TextChoices):
        CASH = "CASH", "Cash"
        CARD = "CARD", "Card"
        TRANSFER = "TRANSFER", "Bank transfer"
        QR = "QR", "QR wallet"

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    shift = models.ForeignKey(
        "shifts.CashShift",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )

    method = models.CharField(max_length=16, choices=Method.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.method} {self.amount}"
