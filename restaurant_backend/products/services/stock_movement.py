# products/services/stock_movement.py

"""
INGREDIENT STOCK ENGINE

Purpose:
- Register stock movements (PURCHASE / SALE / WASTE / ADJUSTMENT) and apply
  them to Ingredient.stock in the same transaction.
- Deduct recipe ingredients for a freshly created order.

HARD RULES:
- Ingredient.stock is changed with F() increments only, so concurrent orders
  consuming the same ingredient never lose an update.
- quantity must be > 0 for PURCHASE / SALE / WASTE; ADJUSTMENT takes a signed delta.
- Callers that already hold a transaction (order creation) get their
  movements committed or rolled back with the order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import F

from products.models import Ingredient, ProductIngredient, StockMovement

logger = logging.getLogger(__name__)

THREEPLACES = Decimal("0.001")


# ============================================================
# DOMAIN ERRORS
# ============================================================

class StockMovementError(Exception):
    pass


def _to_qty(value) -> Decimal:
    if isinstance(value, bool):
        raise StockMovementError("quantity must be a number")
    try:
        return Decimal(str(value)).quantize(THREEPLACES)
    except (InvalidOperation, ValueError) as exc:
        raise StockMovementError(f"Invalid quantity: {value!r}") from exc


def _signed_delta(movement_type: str, qty: Decimal) -> Decimal:
    if movement_type in (StockMovement.MovementType.SALE, StockMovement.MovementType.WASTE):
        return -abs(qty)
    if movement_type == StockMovement.MovementType.PURCHASE:
        return abs(qty)
    return qty


# ============================================================
# MOVEMENTS
# ============================================================

@transaction.atomic
def register_stock_movement(*, ingredient, movement_type, quantity, reason="", order=None):
    """
    Record one movement and apply it to the ingredient stock.

    Returns (movement, new_stock).
    """
    if movement_type not in StockMovement.MovementType.values:
        raise StockMovementError(f"Unknown movement type: {movement_type}")

    qty = _to_qty(quantity)
    if movement_type != StockMovement.MovementType.ADJUSTMENT and qty <= 0:
        raise StockMovementError(
            "Quantity must be positive for PURCHASE, SALE or WASTE movements"
        )
    if qty == 0:
        raise StockMovementError("Adjustment delta cannot be zero")

    ingredient_id = getattr(ingredient, "pk", ingredient)
    if not Ingredient.objects.filter(pk=ingredient_id).exists():
        raise StockMovementError(f"Ingredient {ingredient_id} not found")

    movement = StockMovement.objects.create(
        ingredient_id=ingredient_id,
        movement_type=movement_type,
        quantity=qty,
        reason=str(reason or "").strip(),
        order=order,
    )

    Ingredient.objects.filter(pk=ingredient_id).update(
        stock=F("stock") + _signed_delta(movement_type, qty)
    )

    refreshed = Ingredient.objects.only("stock", "min_stock", "name").get(pk=ingredient_id)
    _check_low_stock(refreshed)

    return movement, refreshed.stock


def _check_low_stock(ingredient: Ingredient) -> None:
    if ingredient.stock <= ingredient.min_stock:
        logger.warning(
            "LOW_STOCK",
            extra={
                "ingredient_id": ingredient.pk,
                "ingredient": ingredient.name,
                "stock": str(ingredient.stock),
                "min_stock": str(ingredient.min_stock),
            },
        )


# ============================================================
# ORDER DEDUCTION
# ============================================================

def recipe_requirements(*, items) -> dict:
    """
    Aggregate ingredient consumption for a list of (product, quantity) pairs.

    Non-stockable products and products without a recipe contribute nothing.
    Returns {ingredient_id: Decimal quantity}.
    """
    stockable = {}
    for product, qty in items:
        if getattr(product, "is_stockable", False):
            stockable[product.pk] = stockable.get(product.pk, 0) + int(qty)

    if not stockable:
        return {}

    needed = defaultdict(Decimal)
    lines = ProductIngredient.objects.filter(product_id__in=stockable.keys())
    for line in lines:
        needed[line.ingredient_id] += (
            Decimal(line.quantity) * Decimal(stockable[line.product_id])
        ).quantize(THREEPLACES)

    return dict(needed)


def deduct_stock_for_order(*, order, items=None) -> list:
    """
    Register one SALE movement per consumed ingredient of the order.

    `items` limits the deduction to those lines (items added to an existing
    order); by default every line of the order is deducted.
    Must run inside the transaction that wrote the items.
    """
    if items is None:
        items = order.items.select_related("product")
    pairs = [(item.product, item.quantity) for item in items]
    needed = recipe_requirements(items=pairs)

    movements = []
    for ingredient_id in sorted(needed):
        movement, _ = register_stock_movement(
            ingredient=ingredient_id,
            movement_type=StockMovement.MovementType.SALE,
            quantity=needed[ingredient_id],
            reason=f"Order #{order.order_number} ({order.sequence_key})",
            order=order,
        )
        movements.append(movement)

    logger.debug(
        "ORDER_STOCK_DEDUCTED",
        extra={"order_id": str(order.pk), "ingredients": len(movements)},
    )
    return movements
