# products/models/ingredient.py

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Ingredient(models.Model):
    """
    Raw stock item (kg of flour, units of buns, litres of oil).

    stock is mutated ONLY through products.services.stock_movement,
    always with an F() expression (never read-modify-write).
    """

    name = models.CharField(max_length=120, unique=True)
    unit = models.CharField(max_length=16, default="unit")

    stock = models.DecimalField(
        max_digits=12, decimal_places=3, default=Decimal("0.000")
    )
    min_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0.000"),
        help_text="Low-stock warning threshold",
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.stock} {self.unit})"


class ProductIngredient(models.Model):
    """
    Recipe line: how much of an ingredient one unit of product consumes.
    """

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="recipe",
    )
    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.PROTECT,
        related_name="used_in",
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.001"))],
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["product", "ingredient"],
                name="unique_recipe_line",
            ),
        ]

    def __str__(self):
        return f"{self.product} uses {self.quantity} {self.ingredient.unit} {self.ingredient.name}"
