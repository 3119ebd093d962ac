# orders/conf.py

"""
Accessor for the ORDERS settings dict.

Values are read on every call so tests can use override_settings().
"""

from __future__ import annotations

from django.conf import settings

DEFAULTS = {
    "BUSINESS_DAY_CUTOFF_HOUR": 6,
    "SEQUENCE_GRANULARITY": "daily",
    "SEQUENCE_MAX_ATTEMPTS": 2,
    "MAX_EXPECTED_ORDER_NUMBER": 9999,
    "SLOW_GENERATION_MS": 100,
    "STRICT_STATUS_TRANSITIONS": False,
}


def orders_setting(name: str):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown ORDERS setting: {name}")
    overrides = getattr(settings, "ORDERS", None) or {}
    return overrides.get(name, DEFAULTS[name])
