"""
Weekly availability model.

Plain value objects describing when the business is open. They carry no
persistence concerns; the settings store loads and saves them.

Times are minutes since midnight (0-1439). Ranges are half-open, so a range
ending at 18:00 is closed at exactly 18:00. Ranges never wrap past midnight:
a business open 22:00-02:00 is stored as 22:00-23:59 on the first day and
00:00-02:00 on the next.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, time
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from django.db import models
from django.utils.translation import gettext_lazy as _

from .exceptions import InvalidScheduleRangeError

MINUTES_PER_DAY = 24 * 60
LAST_MINUTE = MINUTES_PER_DAY - 1


class Weekday(models.IntegerChoices):
    MONDAY = 0, _("Monday")
    TUESDAY = 1, _("Tuesday")
    WEDNESDAY = 2, _("Wednesday")
    THURSDAY = 3, _("Thursday")
    FRIDAY = 4, _("Friday")
    SATURDAY = 5, _("Saturday")
    SUNDAY = 6, _("Sunday")


def parse_time_of_day(value: str) -> int:
    """Parse an ``HH:MM`` string into minutes since midnight."""
    try:
        hours_str, minutes_str = value.strip().split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError):
        raise InvalidScheduleRangeError(f"'{value}' is not a valid HH:MM time")

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise InvalidScheduleRangeError(f"'{value}' is not a valid HH:MM time")
    return hours * 60 + minutes


def format_time_of_day(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_of_day(value) -> int:
    """Minutes since midnight for a datetime or time; seconds are truncated."""
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class TimeRange:
    """A half-open ``[start, end)`` interval within a single day."""

    start: int
    end: int

    def __post_init__(self) -> None:
        for minutes in (self.start, self.end):
            if not 0 <= minutes <= LAST_MINUTE:
                raise InvalidScheduleRangeError(
                    f"Time {minutes} is outside the day (0-{LAST_MINUTE} minutes)"
                )
        if self.start >= self.end:
            raise InvalidScheduleRangeError(
                f"Range start {format_time_of_day(self.start)} must be before "
                f"end {format_time_of_day(self.end)}"
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeRange":
        return cls(start=parse_time_of_day(start), end=parse_time_of_day(end))

    @classmethod
    def parse(cls, value: str) -> "TimeRange":
        """Parse the ``"09:00-13:00"`` form used by the settings backend."""
        parts = value.split("-")
        if len(parts) != 2:
            raise InvalidScheduleRangeError(f"'{value}' is not a valid HH:MM-HH:MM range")
        return cls.from_strings(parts[0], parts[1])

    @property
    def opening_time(self) -> time:
        return time(self.start // 60, self.start % 60)

    @property
    def closing_time(self) -> time:
        return time(self.end // 60, self.end % 60)

    def contains(self, minutes: int) -> bool:
        return self.start <= minutes < self.end

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{format_time_of_day(self.start)}-{format_time_of_day(self.end)}"


@dataclass(frozen=True)
class DaySchedule:
    """
    One weekday's open flag plus its time ranges.

    Evaluation tolerates any content (a closed day with leftover ranges is
    simply closed). ``validate()`` enforces the stored invariants and is called
    wherever schedules enter the system.
    """

    is_open: bool = False
    ranges: Tuple[TimeRange, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ranges", tuple(self.ranges))

    @classmethod
    def closed(cls) -> "DaySchedule":
        return cls(is_open=False, ranges=())

    @classmethod
    def open_with(cls, *ranges: TimeRange) -> "DaySchedule":
        return cls(is_open=True, ranges=tuple(ranges))

    def validate(self, day=None) -> None:
        if not self.is_open:
            if self.ranges:
                raise InvalidScheduleRangeError("A closed day cannot hold time ranges", day=day)
            return

        for previous, current in zip(self.ranges, self.ranges[1:]):
            if current.start < previous.start:
                raise InvalidScheduleRangeError(
                    f"Time ranges must be sorted by start time ({previous} before {current})",
                    day=day,
                )
            if previous.overlaps(current):
                raise InvalidScheduleRangeError(
                    f"Time ranges overlap: {previous} and {current}", day=day
                )

    def is_open_at_minute(self, minutes: int) -> bool:
        if not self.is_open:
            return False
        return any(time_range.contains(minutes) for time_range in self.ranges)


def _closed_week() -> Dict[Weekday, DaySchedule]:
    return {day: DaySchedule.closed() for day in Weekday}


@dataclass(frozen=True)
class WeeklyAvailability:
    """Seven-day aggregate of DaySchedule, keyed by every weekday."""

    days: Mapping[Weekday, DaySchedule] = field(default_factory=_closed_week)

    def __post_init__(self) -> None:
        # Read-only view over a private copy; changes go through with_day()
        object.__setattr__(self, "days", MappingProxyType(dict(self.days)))
        missing = [day.label for day in Weekday if day not in self.days]
        if missing:
            raise InvalidScheduleRangeError(f"Missing schedule for: {', '.join(map(str, missing))}")

    @classmethod
    def from_days(cls, days: Dict[int, DaySchedule]) -> "WeeklyAvailability":
        """Build and validate a week from a weekday-number mapping."""
        availability = cls(days={Weekday(day): schedule for day, schedule in days.items()})
        availability.validate()
        return availability

    @classmethod
    def uniform(cls, *ranges: TimeRange, open_days: Optional[Iterable[int]] = None) -> "WeeklyAvailability":
        """Same ranges on every open day; the remaining days are closed."""
        open_days = set(Weekday) if open_days is None else {Weekday(d) for d in open_days}
        days = {
            day: DaySchedule.open_with(*ranges) if day in open_days else DaySchedule.closed()
            for day in Weekday
        }
        return cls.from_days(days)

    def validate(self) -> None:
        for day in Weekday:
            self.days[day].validate(day=day.label)

    def for_day(self, weekday: int) -> DaySchedule:
        return self.days[Weekday(weekday)]

    def with_day(self, weekday: int, schedule: DaySchedule) -> "WeeklyAvailability":
        """Return a copy with one day replaced, rejecting invalid schedules."""
        day = Weekday(weekday)
        schedule.validate(day=day.label)
        return replace(self, days={**self.days, day: schedule})

    def is_open_at(self, local_dt: datetime) -> bool:
        """
        Check a business-local wall-clock value against that day's ranges.

        No lookahead into the previous or next day is done.
        """
        schedule = self.for_day(local_dt.weekday())
        return schedule.is_open_at_minute(minutes_of_day(local_dt))
