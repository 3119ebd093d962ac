# features/models.py

from django.db import models


class FeatureConfig(models.Model):
    """
    Single-row restaurant configuration with optional-module toggles.

    Read through features.services.flags.FeatureFlagStore (cached);
    saving a row invalidates the store.
    """

    FLAG_FIELDS = ("enable_stock", "enable_kds", "enable_delivery")

    business_name = models.CharField(max_length=120, default="My Restaurant")
    currency_symbol = models.CharField(max_length=8, default="$")

    enable_stock = models.BooleanField(
        default=True, help_text="Deduct ingredient stock when orders are created."
    )
    enable_kds = models.BooleanField(
        default=True, help_text="Publish order events to kitchen display clients."
    )
    enable_delivery = models.BooleanField(
        default=False, help_text="Accept DELIVERY channel orders."
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Feature configuration"
        verbose_name_plural = "Feature configuration"

    def __str__(self):
        return f"{self.business_name} (features)"
