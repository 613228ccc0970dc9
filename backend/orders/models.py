"""
Order domain models.

Orders are plain frozen value objects; persistence lives behind
orders.stores.OrderStore. Status changes go through OrderStatusMachine only.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
import uuid

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", _("Pendiente")  # Just arrived, waiting for the merchant
    ACCEPTED = "ACCEPTED", _("Aceptado")
    PREPARING = "PREPARING", _("En Elaboración")
    READY = "READY", _("Listo")  # Waiting for pickup or courier
    COMPLETED = "COMPLETED", _("Completado")
    CANCELLED = "CANCELLED", _("Cancelado")


class OrderActor(models.TextChoices):
    """Who caused a status change"""
    CUSTOMER = "CUSTOMER", _("Cliente")
    BUSINESS = "BUSINESS", _("Negocio")
    SYSTEM = "SYSTEM", _("Sistema")
    DELIVERY = "DELIVERY", _("Repartidor")


class PaymentMethod(models.TextChoices):
    CASH = "CASH", _("Efectivo")
    CARD = "CARD", _("Tarjeta")
    TRANSFER = "TRANSFER", _("Transferencia")
    DIGITAL_WALLET = "DIGITAL_WALLET", _("Billetera digital")


@dataclass(frozen=True)
class Customer:
    name: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class OrderItem:
    name: str
    quantity: int
    unit_price: Decimal
    special_instructions: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("Item quantity must be positive")

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderTimelineEntry:
    """One recorded status change, oldest first on Order.timeline."""

    status: OrderStatus
    timestamp: datetime
    message: Optional[str] = None
    actor: OrderActor = OrderActor.BUSINESS


@dataclass(frozen=True)
class Order:
    """An order as owned by the status machine after intake."""

    order_number: str
    customer: Customer
    items: Tuple[OrderItem, ...] = ()
    status: OrderStatus = OrderStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH
    total: Decimal = Decimal("0.00")
    estimated_ready_minutes: Optional[int] = None
    special_notes: Optional[str] = None
    id: uuid.UUID = None
    created_at: datetime = None
    updated_at: Optional[datetime] = None
    timeline: Tuple[OrderTimelineEntry, ...] = ()

    def __post_init__(self) -> None:
        # Frozen dataclass: fill generated defaults through object.__setattr__
        if self.id is None:
            object.__setattr__(self, "id", uuid.uuid4())
        if self.created_at is None:
            object.__setattr__(self, "created_at", timezone.now())
        object.__setattr__(self, "status", OrderStatus(self.status))
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "timeline", tuple(self.timeline))

    def __str__(self):
        return f"Order {self.order_number} ({self.status})"

    @property
    def customer_name(self) -> str:
        return self.customer.name

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def last_status_at(self) -> datetime:
        """When the current status was entered"""
        if self.timeline:
            return self.timeline[-1].timestamp
        return self.created_at
