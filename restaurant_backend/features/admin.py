# features/admin.py

from django.contrib import admin

from features.models import FeatureConfig


@admin.register(FeatureConfig)
class FeatureConfigAdmin(admin.ModelAdmin):
    list_display = (
        "business_name",
        "enable_stock",
        "enable_kds",
        "enable_delivery",
        "updated_at",
    )
