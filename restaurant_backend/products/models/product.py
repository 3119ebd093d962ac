# products/models/product.py

import uuid

from django.db import models


class Product(models.Model):
    """
    Represents a sellable menu product.

    STOCK MODEL (IMPORTANT):
    - Product itself does NOT store stock
    - Stockable products consume Ingredients through their recipe
      (ProductIngredient rows); each sale deducts ingredient stock
    - unit_price is the current selling price; OrderItem snapshots it
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=128, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)

    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    is_stockable = models.BooleanField(
        default=True,
        help_text="If false, orders never deduct ingredient stock for this product.",
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.sku})"
