# features/services/flags.py

"""
FEATURE FLAG STORE

Explicit process-wide state object for FeatureConfig:
- constructed once at startup (FeaturesConfig.ready)
- cached with a TTL; is_stale() tells whether the next read hits the DB
- invalidate() drops the cache, refresh() reloads it immediately

The row is created with defaults on first read if it does not exist.
"""

from __future__ import annotations

import logging
import threading
import time

from django.apps import apps

logger = logging.getLogger(__name__)


class FeatureFlagStore:
    def __init__(self, ttl_seconds: float = 60.0, clock=time.monotonic):
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._config = None
        self._expires_at = 0.0

    def _model(self):
        return apps.get_model("features", "FeatureConfig")

    def is_stale(self) -> bool:
        return self._config is None or self._clock() >= self._expires_at

    def refresh(self):
        model = self._model()
        config = model.objects.order_by("pk").first()
        if config is None:
            config = model.objects.create()
            logger.info("FEATURE_CONFIG_CREATED", extra={"config_id": config.pk})

        with self._lock:
            self._config = config
            self._expires_at = self._clock() + self.ttl_seconds
        return config

    def invalidate(self) -> None:
        with self._lock:
            self._config = None
            self._expires_at = 0.0

    def get_config(self):
        if self.is_stale():
            return self.refresh()
        return self._config

    def is_enabled(self, flag: str) -> bool:
        if flag not in self._model().FLAG_FIELDS:
            raise ValueError(f"Unknown feature flag: {flag}")
        return bool(getattr(self.get_config(), flag))


def get_flag_store() -> FeatureFlagStore:
    return apps.get_app_config("features").flag_store


def is_feature_enabled(flag: str) -> bool:
    return get_flag_store().is_enabled(flag)
