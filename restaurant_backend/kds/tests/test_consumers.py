# kds/tests/test_consumers.py

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import TransactionTestCase, override_settings

from kds.consumers import KitchenDisplayConsumer

IN_MEMORY_LAYER = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}


@override_settings(CHANNEL_LAYERS=IN_MEMORY_LAYER, KDS_GROUP_NAME="kitchen-ws-test")
class KitchenDisplayConsumerTests(TransactionTestCase):
    """
    connect/disconnect run close_old_connections, so the database must be reachable.
    """

    def test_group_events_are_forwarded_as_json(self):
        async_to_sync(self._forwarding)()

    async def _forwarding(self):
        communicator = WebsocketCommunicator(KitchenDisplayConsumer.as_asgi(), "/ws/kitchen/")
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await get_channel_layer().group_send(
            "kitchen-ws-test",
            {"type": "order.event", "event": "order.updated", "order": {"id": "abc", "status": "PREPARED"}},
        )
        payload = await communicator.receive_json_from()
        self.assertEqual(payload, {"event": "order.updated", "order": {"id": "abc", "status": "PREPARED"}})

        await communicator.send_json_to({"type": "ping"})
        self.assertEqual(await communicator.receive_json_from(), {"type": "pong"})

        await communicator.disconnect()

    def test_anonymous_user_is_rejected(self):
        async_to_sync(self._anonymous)()

    async def _anonymous(self):
        consumer = KitchenDisplayConsumer.as_asgi()

        async def with_anonymous_user(scope, receive, send):
            return await consumer(dict(scope, user=AnonymousUser()), receive, send)

        communicator = WebsocketCommunicator(with_anonymous_user, "/ws/kitchen/")
        connected, code = await communicator.connect()
        self.assertFalse(connected)
        self.assertEqual(code, 4401)
