"""
Outbound delivery of order status events.

The engine only states what happened; a dispatcher decides where it goes
(chat, push, POS terminals). Implementations are picked by dotted path in
settings.ENGINE_NOTIFICATION_DISPATCHER.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Dict
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "order_notifications"
MESSAGE_TYPE = "order.status"


class NotificationDispatcher(ABC):
    @abstractmethod
    def dispatch(self, payload: Dict[str, Any]) -> None:
        """
        Deliver one status event.

        payload: {"order_id", "order_number", "customer_name", "kind"}
        """
        ...


class ChannelLayerNotificationDispatcher(NotificationDispatcher):
    """Broadcasts status events to every socket in the order notifications group."""

    def __init__(self, group_name: str = None):
        self.group_name = group_name or getattr(
            settings, 'ORDER_NOTIFICATIONS_GROUP', DEFAULT_GROUP
        )

    def dispatch(self, payload: Dict[str, Any]) -> None:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning("No channel layer configured; order status event dropped")
            return

        async_to_sync(channel_layer.group_send)(
            self.group_name,
            {"type": MESSAGE_TYPE, "data": payload},
        )
        logger.info(
            f"Order status event '{payload['kind']}' sent to {self.group_name} "
            f"for order {payload['order_number']}"
        )


@lru_cache(maxsize=None)
def get_notification_dispatcher() -> NotificationDispatcher:
    """Return the dispatcher configured by settings.ENGINE_NOTIFICATION_DISPATCHER."""
    dispatcher_path = getattr(
        settings,
        'ENGINE_NOTIFICATION_DISPATCHER',
        'notifications.dispatchers.ChannelLayerNotificationDispatcher',
    )
    return import_string(dispatcher_path)()
