from .stock_movement import (
    StockMovementError,
    deduct_stock_for_order,
    recipe_requirements,
    register_stock_movement,
)

__all__ = [
    "StockMovementError",
    "deduct_stock_for_order",
    "recipe_requirements",
    "register_stock_movement",
]
