from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
import logging

import pytz

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        """
        Check engine configuration when Django starts up.
        An unknown business timezone would make every opening hours check wrong.
        """
        timezone_name = getattr(settings, 'BUSINESS_TIMEZONE', settings.TIME_ZONE)
        try:
            pytz.timezone(timezone_name)
        except pytz.UnknownTimeZoneError:
            raise ImproperlyConfigured(f"Unknown BUSINESS_TIMEZONE '{timezone_name}'")

        logger.debug(f"Business timezone: {timezone_name}")
