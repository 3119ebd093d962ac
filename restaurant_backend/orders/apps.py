# orders/apps.py

"""
ORDERS APP CONFIG

Order intake, order numbering (sharded daily/hourly sequences) and the
order status state machine.
"""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"
