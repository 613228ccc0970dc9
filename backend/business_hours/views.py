import logging

from rest_framework import status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from django.utils.dateparse import parse_datetime

from settings.config import app_settings
from settings.stores import get_settings_store

from .services import BusinessHoursService
from .serializers import (
    BusinessHoursStatusSerializer,
    DayHoursSerializer,
    WeeklyScheduleSerializer,
)

logger = logging.getLogger(__name__)


# Public API Views (no authentication required)
class BusinessHoursStatusView(APIView):
    """Get current business hours status"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        """
        Get open/closed status with context

        Query params:
        - at: Optional ISO 8601 datetime to check instead of now
        """
        at_str = request.query_params.get('at')
        at = None
        if at_str:
            at = parse_datetime(at_str)
            if at is None:
                return Response(
                    {"error": "Invalid datetime format. Use ISO 8601"},
                    status=status.HTTP_400_BAD_REQUEST
                )

        service = BusinessHoursService()
        summary = service.get_status_summary(at)

        serializer = BusinessHoursStatusSerializer(summary)
        return Response(serializer.data)


class BusinessHoursScheduleView(APIView):
    """Read and replace the weekly business hours schedule"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        service = BusinessHoursService()
        days = {
            day: DayHoursSerializer(hours).data
            for day, hours in service.get_weekly_schedule().items()
        }
        return Response({
            "timezone": service.timezone_name,
            "schedule": WeeklyScheduleSerializer(service.availability).data,
            "days": days,
        })

    def put(self, request):
        """
        Replace the weekly schedule

        Body: {"lun": ["09:00-13:00", "16:00-20:00"], ...}; missing days are closed.
        """
        serializer = WeeklyScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        availability = serializer.to_availability()
        get_settings_store().save_weekly_availability(availability)
        app_settings.reload()

        logger.info("Weekly business hours updated")
        return Response(WeeklyScheduleSerializer(availability).data)
