# products/admin.py
"""
Admin rules (audit-safe stock):

- Ingredient.stock is read-only here. Stock only changes through
  StockMovement rows, which are routed through register_stock_movement()
  so the ledger row and the stock update are written together.
- Existing StockMovement rows are immutable and cannot be edited or deleted.
"""

from __future__ import annotations

from django.contrib import admin, messages

from products.models import Ingredient, Product, ProductIngredient, StockMovement
from products.services import StockMovementError, register_stock_movement


class ProductIngredientInline(admin.TabularInline):
    model = ProductIngredient
    extra = 1
    autocomplete_fields = ("ingredient",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "unit_price", "is_stockable", "is_active")
    list_filter = ("is_active", "is_stockable")
    search_fields = ("name", "sku")
    inlines = [ProductIngredientInline]


@admin.register(Ingredient)
class IngredientAdmin(admin.ModelAdmin):
    list_display = ("name", "unit", "stock", "min_stock")
    search_fields = ("name",)
    readonly_fields = ("stock",)


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("created_at", "ingredient", "movement_type", "quantity", "order", "reason")
    list_filter = ("movement_type",)
    search_fields = ("ingredient__name", "reason")
    fields = ("ingredient", "movement_type", "quantity", "reason")

    def has_change_permission(self, request, obj=None):
        return obj is None

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        try:
            movement, _ = register_stock_movement(
                ingredient=obj.ingredient,
                movement_type=obj.movement_type,
                quantity=obj.quantity,
                reason=obj.reason,
            )
        except StockMovementError as exc:
            self.message_user(request, str(exc), level=messages.ERROR)
            return
        obj.pk = movement.pk
        obj._state.adding = False
