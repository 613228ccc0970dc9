"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
The engine keeps its state in process-local stores, so none of these
fixtures need the database.
"""
import pytest
from datetime import datetime
from decimal import Decimal

import pytz
from rest_framework.test import APIClient

from business_hours.schedule import DaySchedule, TimeRange, Weekday, WeeklyAvailability
from notifications.dispatchers import get_notification_dispatcher
from orders.models import Customer, Order, OrderItem, OrderStatus
from orders.stores import get_order_store
from settings.config import app_settings
from settings.stores import get_settings_store

BUSINESS_TZ = "America/Argentina/Buenos_Aires"


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def engine_settings(settings):
    """Pin the engine configuration so tests don't depend on the local .env."""
    settings.BUSINESS_TIMEZONE = BUSINESS_TZ
    settings.TIME_ZONE = BUSINESS_TZ
    settings.ENGINE_SETTINGS_STORE = "settings.stores.InMemorySettingsStore"
    settings.ENGINE_ORDER_STORE = "orders.stores.InMemoryOrderStore"
    settings.ENGINE_NOTIFICATION_DISPATCHER = (
        "notifications.dispatchers.ChannelLayerNotificationDispatcher"
    )
    settings.ORDER_NOTIFICATIONS_GROUP = "order_notifications"
    return settings


@pytest.fixture(autouse=True)
def reset_engine_state(engine_settings):
    """
    Reset stores and the AppSettings read model around each test.

    CRITICAL: stores are process-wide singletons; without this, schedules and
    orders saved by one test leak into the next.
    """
    _reset()
    yield
    _reset()


def _reset():
    get_settings_store.cache_clear()
    get_order_store.cache_clear()
    get_notification_dispatcher.cache_clear()
    app_settings.reset()


# ============================================================================
# SCHEDULE FIXTURES
# ============================================================================

@pytest.fixture
def business_tz():
    return pytz.timezone(BUSINESS_TZ)


@pytest.fixture
def local_dt(business_tz):
    """Build aware datetimes in the business timezone: local_dt(2024, 1, 15, 14, 0)"""
    def _local_dt(*args):
        return business_tz.localize(datetime(*args))
    return _local_dt


@pytest.fixture
def split_shift_week():
    """
    Monday to Friday 09:00-13:00 and 16:00-20:00, Saturday 10:00-14:00,
    Sunday closed.
    """
    split_shift = DaySchedule.open_with(
        TimeRange.from_strings("09:00", "13:00"),
        TimeRange.from_strings("16:00", "20:00"),
    )
    days = {day: split_shift for day in Weekday if day < Weekday.SATURDAY}
    days[Weekday.SATURDAY] = DaySchedule.open_with(TimeRange.from_strings("10:00", "14:00"))
    days[Weekday.SUNDAY] = DaySchedule.closed()
    return WeeklyAvailability.from_days(days)


@pytest.fixture
def configured_week(split_shift_week):
    """Save the split shift week in the settings store, as the settings screen would."""
    get_settings_store().save_weekly_availability(split_shift_week)
    app_settings.reload()
    return split_shift_week


@pytest.fixture
def always_open():
    return WeeklyAvailability.uniform(TimeRange(0, 1439))


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def order_factory():
    """Create orders without touching the store"""
    counter = {"value": 0}

    def _create(status=OrderStatus.PENDING, **kwargs):
        counter["value"] += 1
        defaults = {
            "order_number": f"ORD-{1000 + counter['value']}",
            "customer": Customer(name="Lucía Gómez", phone="+54 11 5555-0101"),
            "items": (
                OrderItem(name="Empanada de carne", quantity=6, unit_price=Decimal("1.50")),
                OrderItem(name="Flan", quantity=1, unit_price=Decimal("3.00")),
            ),
            "total": Decimal("12.00"),
        }
        defaults.update(kwargs)
        return Order(status=status, **defaults)

    return _create


@pytest.fixture
def stored_order(order_factory):
    """A pending order saved in the order store"""
    return get_order_store().save(order_factory())


# ============================================================================
# NOTIFICATION FIXTURES
# ============================================================================

class RecordingDispatcher:
    """Dispatcher double that keeps every payload it receives"""

    def __init__(self):
        self.payloads = []

    def dispatch(self, payload):
        self.payloads.append(payload)


@pytest.fixture
def recording_dispatcher(monkeypatch):
    dispatcher = RecordingDispatcher()
    monkeypatch.setattr(
        "notifications.signals.get_notification_dispatcher", lambda: dispatcher
    )
    return dispatcher


# ============================================================================
# TIMER FIXTURES
# ============================================================================

class FakeTimer:
    """
    Stand-in for threading.Timer. Tests fire timers by hand, so presenter
    behavior is checked without sleeping.
    """

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        """Run the callback the way an expired (possibly already cancelled) timer thread would."""
        self.function(*self.args, **self.kwargs)


@pytest.fixture
def fake_timers():
    """Factory that records every FakeTimer created"""
    created = []

    def factory(interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args=args, kwargs=kwargs)
        created.append(timer)
        return timer

    factory.created = created
    return factory


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """DRF API client; the engine endpoints need no authentication"""
    return APIClient()
