"""
Order store interfaces.

Storage design belongs to the host system; the engine only needs to load an
order, save the result of a transition, and count recent orders for the
throughput cap.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from threading import Lock
from typing import Dict
import logging

from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import OrderNotFoundError
from .models import Order

logger = logging.getLogger(__name__)


class OrderStore(ABC):
    """Interface for order persistence."""

    @abstractmethod
    def get(self, order_id) -> Order:
        """Raises OrderNotFoundError for unknown ids."""
        ...

    @abstractmethod
    def save(self, order: Order) -> Order:
        ...

    @abstractmethod
    def count_created_between(self, start: datetime, end: datetime) -> int:
        """Orders with ``start <= created_at < end``."""
        ...


class InMemoryOrderStore(OrderStore):
    def __init__(self):
        self._lock = Lock()
        self._orders: Dict[str, Order] = {}

    def clear(self) -> None:
        with self._lock:
            self._orders.clear()

    def get(self, order_id) -> Order:
        try:
            return self._orders[str(order_id)]
        except KeyError:
            raise OrderNotFoundError(order_id)

    def save(self, order: Order) -> Order:
        with self._lock:
            self._orders[str(order.id)] = order
        logger.debug(f"Saved order {order.order_number} ({order.status})")
        return order

    def count_created_between(self, start: datetime, end: datetime) -> int:
        with self._lock:
            orders = list(self._orders.values())
        return sum(1 for order in orders if start <= order.created_at < end)


@lru_cache(maxsize=None)
def get_order_store() -> OrderStore:
    """Return the store configured by settings.ENGINE_ORDER_STORE."""
    store_path = getattr(settings, 'ENGINE_ORDER_STORE', 'orders.stores.InMemoryOrderStore')
    return import_string(store_path)()
