from django.dispatch import receiver
import logging

from orders.models import OrderStatus
from orders.signals import order_status_changed
from settings.config import app_settings

from .dispatchers import get_notification_dispatcher

logger = logging.getLogger(__name__)


def build_status_payload(order) -> dict:
    """
    Payload forwarded for a status change. ``kind`` is the new status value.
    Cancellations also carry the ``reason`` recorded on the order timeline.
    Values are plain strings so the channel layer can serialize them.
    """
    payload = {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "customer_name": order.customer_name,
        "kind": str(order.status),
    }
    if order.status == OrderStatus.CANCELLED:
        payload["reason"] = order.timeline[-1].message if order.timeline else None
    return payload


@receiver(order_status_changed)
def handle_order_status_changed(sender, order, previous_status, **kwargs):
    """
    Forward every applied transition to the notification dispatcher,
    unless the merchant turned order status updates off.
    """
    if not app_settings.notification_settings.order_status_updates:
        logger.debug(f"Order status updates disabled; not forwarding order {order.order_number}")
        return

    payload = build_status_payload(order)

    try:
        get_notification_dispatcher().dispatch(payload)
    except Exception as e:
        logger.error(
            f"Error dispatching status event for order {order.order_number} "
            f"({previous_status} -> {order.status}): {e}"
        )
        # Don't raise; the transition itself already succeeded
