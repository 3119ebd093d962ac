# kds/apps.py

"""
KDS APP CONFIG

Kitchen Display System real-time fan-out (Django Channels).
"""

from django.apps import AppConfig


class KdsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "kds"
    verbose_name = "Kitchen Display"
