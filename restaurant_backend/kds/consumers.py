# kds/consumers.py

"""
KITCHEN DISPLAY WEBSOCKET CONSUMER

Each connected kitchen screen joins the KDS group and receives every order
event as JSON:

    {"event": "order.updated", "order": {...}}

Read-only: messages sent by clients are ignored apart from "ping".
"""

from __future__ import annotations

from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.conf import settings


def kds_group_name() -> str:
    return getattr(settings, "KDS_GROUP_NAME", "kitchen")


class KitchenDisplayConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        user = self.scope.get("user")
        if user is not None and not user.is_authenticated:
            await self.close(code=4401)
            return

        await self.channel_layer.group_add(kds_group_name(), self.channel_name)
        await self.accept()

    async def disconnect(self, code):
        await self.channel_layer.group_discard(kds_group_name(), self.channel_name)

    async def receive_json(self, content, **kwargs):
        if isinstance(content, dict) and content.get("type") == "ping":
            await self.send_json({"type": "pong"})

    async def order_event(self, message):
        await self.send_json({"event": message["event"], "order": message["order"]})
