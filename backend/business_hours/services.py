from datetime import datetime, date, time, timedelta
from typing import Dict, Optional
import logging

import pytz
from django.conf import settings
from django.utils import timezone

from .schedule import WeeklyAvailability, Weekday, DaySchedule, minutes_of_day

logger = logging.getLogger(__name__)

CLOSED_LABEL = "Cerrado"
RANGE_SEPARATOR = "–"
DAYS_TO_SEARCH = 7


class BusinessHoursService:
    """Service class for handling all business hours logic"""

    def __init__(self, availability: Optional[WeeklyAvailability] = None, timezone_name: Optional[str] = None):
        """
        Initialize service with a specific weekly availability or the configured one

        Args:
            availability: Weekly schedule to evaluate. If None, uses the store-backed app settings.
            timezone_name: Business timezone. If None, uses settings.BUSINESS_TIMEZONE.
        """
        self._availability = availability
        self.timezone_name = timezone_name or getattr(settings, 'BUSINESS_TIMEZONE', 'UTC')

    @property
    def availability(self) -> WeeklyAvailability:
        """Get the weekly availability (loaded lazily from app settings)"""
        if self._availability is None:
            from settings.config import app_settings
            self._availability = app_settings.weekly_availability
        return self._availability

    @property
    def business_tz(self):
        return pytz.timezone(self.timezone_name)

    def to_business_time(self, dt: Optional[datetime] = None) -> datetime:
        """
        Resolve a datetime into business-local time.

        Naive datetimes are taken as business-local wall clock; aware ones are converted.
        """
        if dt is None:
            dt = timezone.now()

        if dt.tzinfo is None:
            return self.business_tz.localize(dt)
        return dt.astimezone(self.business_tz)

    def is_open(self, dt: Optional[datetime] = None) -> bool:
        """
        Check if the business is open at a specific datetime

        Args:
            dt: Datetime to check. If None, uses current time.

        Returns:
            True if open, False if closed
        """
        local_dt = self.to_business_time(dt)
        return self.availability.is_open_at(local_dt)

    def get_day_schedule(self, target_date: date) -> DaySchedule:
        return self.availability.for_day(target_date.weekday())

    def get_today_range_summary(self, dt: Optional[datetime] = None) -> str:
        """
        Human-readable summary of today's ranges, e.g. "09:00–13:00, 16:00–20:00".

        Returns "Cerrado" when the day is closed or has no ranges.
        """
        local_dt = self.to_business_time(dt)
        return self.format_day_schedule(self.get_day_schedule(local_dt.date()))

    @staticmethod
    def format_day_schedule(schedule: DaySchedule) -> str:
        if not schedule.is_open or not schedule.ranges:
            return CLOSED_LABEL
        return ", ".join(
            str(r).replace('-', RANGE_SEPARATOR) for r in schedule.ranges
        )

    def get_next_opening_time(self, from_dt: Optional[datetime] = None) -> Optional[datetime]:
        """
        Get the next time the business will open

        Args:
            from_dt: Start searching from this datetime. If None, uses current time.

        Returns:
            Next opening datetime or None if no opening found in the next week
        """
        from_dt = self.to_business_time(from_dt)

        for i in range(DAYS_TO_SEARCH + 1):
            check_date = (from_dt + timedelta(days=i)).date()
            schedule = self.get_day_schedule(check_date)
            if not schedule.is_open:
                continue

            for time_range in schedule.ranges:
                opening_dt = self.business_tz.localize(
                    datetime.combine(check_date, time_range.opening_time)
                )
                # If this is today, make sure opening time is in the future
                if opening_dt <= from_dt:
                    continue
                return opening_dt

        logger.debug(f"No opening found within {DAYS_TO_SEARCH} days of {from_dt}")
        return None

    def get_next_closing_time(self, from_dt: Optional[datetime] = None) -> Optional[datetime]:
        """
        Get the time the business next closes

        Ranges that touch (one ends where the next starts) count as one
        continuous opening, so the closing time is the end of the last of them.

        Returns:
            Closing datetime or None if currently closed
        """
        from_dt = self.to_business_time(from_dt)
        schedule = self.get_day_schedule(from_dt.date())
        if not schedule.is_open:
            return None

        minutes = minutes_of_day(from_dt)
        closing_minutes = None
        for time_range in sorted(schedule.ranges, key=lambda r: r.start):
            if closing_minutes is None:
                if time_range.contains(minutes):
                    closing_minutes = time_range.end
            elif time_range.start <= closing_minutes:
                closing_minutes = max(closing_minutes, time_range.end)
            else:
                break

        if closing_minutes is None:
            return None
        closing_time = time(closing_minutes // 60, closing_minutes % 60)
        return self.business_tz.localize(datetime.combine(from_dt.date(), closing_time))

    def get_weekly_schedule(self) -> Dict[str, Dict]:
        """
        Get the weekly schedule keyed by weekday name

        Returns:
            Dict mapping weekday names to is_open, ranges and display text
        """
        schedule = {}
        for day in Weekday:
            day_schedule = self.availability.for_day(day)
            schedule[day.name.lower()] = {
                'is_open': day_schedule.is_open,
                'ranges': [str(r) for r in day_schedule.ranges],
                'display': self.format_day_schedule(day_schedule),
            }
        return schedule

    def get_status_summary(self, dt: Optional[datetime] = None) -> Dict:
        """
        Get comprehensive status summary

        Args:
            dt: Datetime to check status for. If None, uses current time.

        Returns:
            Dict with current status, next change time, and today's hours
        """
        local_dt = self.to_business_time(dt)
        is_open = self.availability.is_open_at(local_dt)

        summary = {
            'is_open': is_open,
            'current_time': local_dt,
            'timezone': self.timezone_name,
            'today_summary': self.get_today_range_summary(local_dt),
            'next_opening': None,
            'next_closing': None,
        }

        if is_open:
            summary['next_closing'] = self.get_next_closing_time(local_dt)
        else:
            summary['next_opening'] = self.get_next_opening_time(local_dt)

        return summary
