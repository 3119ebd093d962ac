# features/apps.py

"""
FEATURES APP CONFIG

Owns the process-wide FeatureFlagStore: built here at startup and
invalidated whenever a FeatureConfig row is saved.
"""

from django.apps import AppConfig
from django.conf import settings
from django.db.models.signals import post_save


class FeaturesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "features"
    verbose_name = "Feature Flags"

    flag_store = None

    def ready(self):
        from features.services.flags import FeatureFlagStore

        self.flag_store = FeatureFlagStore(
            ttl_seconds=getattr(settings, "FEATURE_FLAG_CACHE_TTL", 60)
        )
        post_save.connect(
            self._invalidate_flags,
            sender=self.get_model("FeatureConfig"),
            dispatch_uid="features.invalidate_flag_store",
        )

    def _invalidate_flags(self, sender, **kwargs):
        self.flag_store.invalidate()
