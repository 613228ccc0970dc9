import json
import logging
from datetime import datetime

from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings

from .dispatchers import DEFAULT_GROUP

logger = logging.getLogger(__name__)


class OrderNotificationConsumer(AsyncWebsocketConsumer):
    """
    WebSocket consumer for order status notifications.
    Every connected client joins the shared order notifications group.
    """

    async def connect(self):
        self.group_name = getattr(settings, 'ORDER_NOTIFICATIONS_GROUP', DEFAULT_GROUP)

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

        logger.info(f"Client {self.channel_name} joined {self.group_name}")

        await self.send(
            text_data=json.dumps(
                {
                    "type": "connection_established",
                    "timestamp": self.get_timestamp(),
                }
            )
        )

    async def disconnect(self, close_code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
            logger.info(f"Client {self.channel_name} left {self.group_name}")

    async def receive(self, text_data):
        """
        Handle client-side events. Only ping is understood.
        """
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.error(f"Invalid JSON received from {self.channel_name}")
            return

        message_type = data.get("type")
        if message_type == "ping":
            await self.send(
                text_data=json.dumps({"type": "pong", "timestamp": self.get_timestamp()})
            )
        else:
            logger.warning(f"Unknown message type from {self.channel_name}: {message_type}")

    # Channel layer event handlers

    async def order_status(self, event):
        """Handle "order.status" events sent by ChannelLayerNotificationDispatcher."""
        await self.send(
            text_data=json.dumps({"type": "order_status", "data": event["data"]})
        )

    def get_timestamp(self):
        return datetime.now().isoformat()
