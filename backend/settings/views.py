import logging

from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .config import app_settings
from .serializers import OrderSettingsSerializer
from .stores import get_settings_store

logger = logging.getLogger(__name__)


class OrderSettingsView(APIView):
    """Read and update the order acceptance settings"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = OrderSettingsSerializer(app_settings.order_settings)
        return Response(serializer.data)

    def put(self, request):
        serializer = OrderSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        policy = serializer.to_policy()
        get_settings_store().save_order_settings(policy)
        app_settings.reload()

        logger.info(
            f"Order settings updated (auto_accept={policy.auto_accept_orders}, "
            f"buffer={policy.prep_time_buffer_minutes}, cap={policy.max_orders_per_hour})"
        )
        return Response(OrderSettingsSerializer(policy).data)
