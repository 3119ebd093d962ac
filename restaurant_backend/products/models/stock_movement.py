# products/models/stock_movement.py

"""
INGREDIENT STOCK LEDGER

Immutable inventory ledger entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- Created ONCE, never edited
- quantity is the raw magnitude for PURCHASE/SALE/WASTE and the signed
  delta for ADJUSTMENT
- Sale movements reference the order that consumed the stock
"""

from django.core.exceptions import ValidationError
from django.db import models

from .ingredient import Ingredient


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        PURCHASE = "PURCHASE", "Purchase"
        SALE = "SALE", "Sale"
        WASTE = "WASTE", "Waste"
        ADJUSTMENT = "ADJUSTMENT", "Manual Adjustment"

    ingredient = models.ForeignKey(
        Ingredient, on_delete=models.CASCADE, related_name="stock_movements"
    )

    movement_type = models.CharField(max_length=16, choices=MovementType.choices)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    reason = models.CharField(max_length=255, blank=True, default="")

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["ingredient", "created_at"], name="stockmove_ingredient_created"),
        ]

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            raise ValidationError("StockMovement is immutable once created.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockMovement is append-only and cannot be deleted.")

    def __str__(self):
        return f"{self.movement_type} {self.quantity} {self.ingredient.name}"
