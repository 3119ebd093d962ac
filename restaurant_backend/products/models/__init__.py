"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .ingredient import Ingredient, ProductIngredient
from .product import Product
from .stock_movement import StockMovement

__all__ = [
    "Ingredient",
    "Product",
    "ProductIngredient",
    "StockMovement",
]
