"""
Django settings for core_backend project.

The engine keeps no ORM models; the database is only configured so Django's
contrib apps load.
"""

from pathlib import Path
from dotenv import load_dotenv
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(BASE_DIR / ".env")


# =============================================================================
# CORE SETTINGS
# =============================================================================

SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-change-me-in-production")
DEBUG = os.environ.get("DEBUG", "False").lower() in ("true", "1", "yes")
ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if host.strip()
]


# =============================================================================
# APPLICATION DEFINITION
# =============================================================================

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    # Third-party
    "rest_framework",
    "channels",
    # Local apps
    "core_backend",
    "business_hours",
    "settings",
    "orders",
    "notifications",
    "confirmations",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "core_backend.urls"

ASGI_APPLICATION = "core_backend.asgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}


# =============================================================================
# CHANNELS
# =============================================================================

CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
    }
}


# =============================================================================
# DJANGO REST FRAMEWORK
# =============================================================================

REST_FRAMEWORK = {
    # Authentication belongs to the host application
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
}


# =============================================================================
# INTERNATIONALIZATION
# =============================================================================

# Opening hours are evaluated in the business's own timezone
BUSINESS_TIMEZONE = os.environ.get("BUSINESS_TIMEZONE", "America/Argentina/Buenos_Aires")

LANGUAGE_CODE = "es"
TIME_ZONE = BUSINESS_TIMEZONE
USE_I18N = True
USE_TZ = True


# =============================================================================
# ORDER ACCEPTANCE ENGINE
# =============================================================================

ENGINE_SETTINGS_STORE = os.environ.get(
    "ENGINE_SETTINGS_STORE", "settings.stores.InMemorySettingsStore"
)
ENGINE_ORDER_STORE = os.environ.get("ENGINE_ORDER_STORE", "orders.stores.InMemoryOrderStore")
ENGINE_NOTIFICATION_DISPATCHER = os.environ.get(
    "ENGINE_NOTIFICATION_DISPATCHER",
    "notifications.dispatchers.ChannelLayerNotificationDispatcher",
)
ORDER_NOTIFICATIONS_GROUP = "order_notifications"

# Confirmation display timing, in seconds
CONFIRMATION_VISIBLE_SECONDS = float(os.environ.get("CONFIRMATION_VISIBLE_SECONDS", "2.5"))
CONFIRMATION_EXIT_SECONDS = float(os.environ.get("CONFIRMATION_EXIT_SECONDS", "0.3"))


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
        **{
            app: {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False}
            for app in ("business_hours", "settings", "orders", "notifications", "confirmations")
        },
    },
}
