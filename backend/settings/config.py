"""
Read model over the merchant settings store.

Business logic reads weekly availability, order settings and notification
settings from ``app_settings`` instead of calling the store directly. Values
are loaded on first access and refreshed by ``reload()`` after every update.
"""

from typing import Any, Optional
from django.core.exceptions import ImproperlyConfigured
import logging

from business_hours.schedule import WeeklyAvailability
from .policy import OrderSettingsPolicy, NotificationSettings

logger = logging.getLogger(__name__)

LOADED_ATTRIBUTES = ("weekly_availability", "order_settings", "notification_settings")


class AppSettings:
    """
    Lazy, process-wide settings holder.

    Importing this module never touches the store; the first attribute
    lookup does.
    """

    _instance: Optional["AppSettings"] = None
    _initialized: bool = False

    def __new__(cls) -> "AppSettings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __getattr__(self, name: str) -> Any:
        # Only called for attributes not found normally, i.e. before loading
        if not self._initialized:
            self.load_settings()
            self._initialized = True

        if name in self.__dict__:
            return self.__dict__[name]
        raise AttributeError(f"'AppSettings' object has no attribute '{name}'")

    def load_settings(self) -> None:
        """
        Pull current values from the configured store.

        Raises:
            ImproperlyConfigured: If the store cannot be built or read.
        """
        from .stores import get_settings_store

        try:
            store = get_settings_store()
            availability: WeeklyAvailability = store.get_weekly_availability()
            order_settings: OrderSettingsPolicy = store.get_order_settings()
            notification_settings: NotificationSettings = store.get_notification_settings()
        except Exception as e:
            raise ImproperlyConfigured(f"Failed to load merchant settings: {e}")

        self.weekly_availability = availability
        self.order_settings = order_settings
        self.notification_settings = notification_settings

    def reload(self) -> None:
        """Refresh after a settings update."""
        self.load_settings()
        self._initialized = True
        logger.info("AppSettings reloaded")

    def reset(self) -> None:
        """Forget loaded values; the next access loads from the store again."""
        for name in LOADED_ATTRIBUTES:
            self.__dict__.pop(name, None)
        self._initialized = False


app_settings = AppSettings()
