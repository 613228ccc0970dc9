from django.urls import path

from . import consumers

websocket_urlpatterns = [
    path("ws/notifications/orders/", consumers.OrderNotificationConsumer.as_asgi()),
]
