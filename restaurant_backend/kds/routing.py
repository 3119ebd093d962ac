# kds/routing.py

"""
WebSocket route map for the kitchen display.
"""

from django.urls import re_path

from kds import consumers

websocket_urlpatterns = [
    re_path(r"^ws/kitchen/$", consumers.KitchenDisplayConsumer.as_asgi()),
]
