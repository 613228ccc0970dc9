"""
Custom exceptions for the business hours system.
"""


class BusinessHoursError(Exception):
    """Base exception for business-hours errors."""
    pass


class InvalidScheduleRangeError(BusinessHoursError):
    """Raised when a time range or day schedule breaks the schedule invariants."""

    def __init__(self, message, day=None):
        self.day = day
        if day is not None:
            message = f"{day}: {message}"
        super().__init__(message)
