from rest_framework import serializers
from typing import Dict, List

from .exceptions import InvalidScheduleRangeError
from .schedule import DaySchedule, TimeRange, Weekday, WeeklyAvailability

# Day keys used by the settings backend, Monday first
BACKEND_DAY_KEYS = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

# Limit enforced by the schedule editor, not by the engine
MAX_RANGES_PER_DAY = 5


def availability_to_backend(availability: WeeklyAvailability) -> Dict[str, List[str]]:
    """Convert to the backend format, leaving out closed days."""
    schedule = {}
    for day, key in zip(Weekday, BACKEND_DAY_KEYS):
        day_schedule = availability.for_day(day)
        if day_schedule.is_open and day_schedule.ranges:
            schedule[key] = [str(r) for r in day_schedule.ranges]
    return schedule


class TimeRangeField(serializers.Field):
    """A single "HH:MM-HH:MM" range"""

    default_error_messages = {
        'invalid': 'Time ranges must be strings in HH:MM-HH:MM format.',
    }

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('invalid')
        try:
            return TimeRange.parse(data)
        except InvalidScheduleRangeError as e:
            raise serializers.ValidationError(str(e))

    def to_representation(self, value):
        return str(value)


class WeeklyScheduleSerializer(serializers.Serializer):
    """
    Serializer for the weekly schedule in backend format:
    {"lun": ["09:00-13:00", "16:00-20:00"], "mar": [...], ...}
    """
    lun = serializers.ListField(child=TimeRangeField(), required=False, max_length=MAX_RANGES_PER_DAY)
    mar = serializers.ListField(child=TimeRangeField(), required=False, max_length=MAX_RANGES_PER_DAY)
    mie = serializers.ListField(child=TimeRangeField(), required=False, max_length=MAX_RANGES_PER_DAY)
    jue = serializers.ListField(child=TimeRangeField(), required=False, max_length=MAX_RANGES_PER_DAY)
    vie = serializers.ListField(child=TimeRangeField(), required=False, max_length=MAX_RANGES_PER_DAY)
    sab = serializers.ListField(child=TimeRangeField(), required=False, max_length=MAX_RANGES_PER_DAY)
    dom = serializers.ListField(child=TimeRangeField(), required=False, max_length=MAX_RANGES_PER_DAY)

    def validate(self, attrs):
        days = {}
        for day, key in zip(Weekday, BACKEND_DAY_KEYS):
            ranges = attrs.get(key) or []
            days[day] = DaySchedule(is_open=bool(ranges), ranges=tuple(ranges))

        try:
            attrs['availability'] = WeeklyAvailability.from_days(days)
        except InvalidScheduleRangeError as e:
            raise serializers.ValidationError(str(e))
        return attrs

    def to_representation(self, instance):
        """Convert a WeeklyAvailability to backend format"""
        if isinstance(instance, WeeklyAvailability):
            return availability_to_backend(instance)
        return super().to_representation(instance)

    def to_availability(self) -> WeeklyAvailability:
        return self.validated_data['availability']


class BusinessHoursStatusSerializer(serializers.Serializer):
    """Serializer for business hours status endpoint"""
    is_open = serializers.BooleanField()
    current_time = serializers.DateTimeField()
    timezone = serializers.CharField()
    today_summary = serializers.CharField()
    next_opening = serializers.DateTimeField(required=False, allow_null=True)
    next_closing = serializers.DateTimeField(required=False, allow_null=True)


class DayHoursSerializer(serializers.Serializer):
    """Serializer for one day of the weekly schedule (used in responses)"""
    is_open = serializers.BooleanField()
    ranges = serializers.ListField(child=serializers.CharField())
    display = serializers.CharField()
