"""
Settings store interfaces.

Stores are swappable and return domain objects. The engine only reads them;
saving is the external settings-update path and must keep the schedule
invariants intact before anything else sees the data.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from threading import Lock
import logging

from django.conf import settings
from django.utils.module_loading import import_string

from business_hours.schedule import WeeklyAvailability
from .policy import OrderSettingsPolicy, NotificationSettings

logger = logging.getLogger(__name__)


class SettingsStore(ABC):
    """Interface for merchant settings persistence."""

    @abstractmethod
    def get_weekly_availability(self) -> WeeklyAvailability:
        ...

    @abstractmethod
    def save_weekly_availability(self, availability: WeeklyAvailability) -> None:
        """Persist a week; raises InvalidScheduleRangeError for invalid schedules."""
        ...

    @abstractmethod
    def get_order_settings(self) -> OrderSettingsPolicy:
        ...

    @abstractmethod
    def save_order_settings(self, policy: OrderSettingsPolicy) -> None:
        ...

    @abstractmethod
    def get_notification_settings(self) -> NotificationSettings:
        ...


class InMemorySettingsStore(SettingsStore):
    """Process-local store; starts with a closed week and default order settings."""

    def __init__(self):
        self._lock = Lock()
        self.clear()

    def clear(self) -> None:
        with self._lock:
            self._availability = WeeklyAvailability()
            self._order_settings = OrderSettingsPolicy()
            self._notification_settings = NotificationSettings()

    def get_weekly_availability(self) -> WeeklyAvailability:
        return self._availability

    def save_weekly_availability(self, availability: WeeklyAvailability) -> None:
        availability.validate()
        with self._lock:
            self._availability = availability
        logger.info("Weekly availability saved")

    def get_order_settings(self) -> OrderSettingsPolicy:
        return self._order_settings

    def save_order_settings(self, policy: OrderSettingsPolicy) -> None:
        with self._lock:
            self._order_settings = policy
        logger.info("Order settings saved")

    def get_notification_settings(self) -> NotificationSettings:
        return self._notification_settings

    def save_notification_settings(self, notification_settings: NotificationSettings) -> None:
        with self._lock:
            self._notification_settings = notification_settings


@lru_cache(maxsize=None)
def get_settings_store() -> SettingsStore:
    """Return the store configured by settings.ENGINE_SETTINGS_STORE."""
    store_path = getattr(
        settings, 'ENGINE_SETTINGS_STORE', 'settings.stores.InMemorySettingsStore'
    )
    return import_string(store_path)()
