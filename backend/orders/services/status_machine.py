from dataclasses import dataclass, replace
from datetime import datetime
from typing import FrozenSet, Optional
import logging

from django.utils import timezone

from confirmations.events import ConfirmationEvent, ConfirmationKind
from orders.exceptions import IllegalTransitionError
from orders.models import Order, OrderActor, OrderStatus, OrderTimelineEntry
from orders.signals import order_status_changed

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_REASON = "Cancelado por el negocio"


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a successful transition; the caller persists ``order``."""

    order: Order
    previous_status: OrderStatus
    confirmation: Optional[ConfirmationEvent] = None
    changed: bool = True


class OrderStatusMachine:
    """Canonical lifecycle of a single order."""

    # Valid status transitions for order state machine
    VALID_STATUS_TRANSITIONS = {
        OrderStatus.PENDING: frozenset({OrderStatus.ACCEPTED, OrderStatus.CANCELLED}),
        OrderStatus.ACCEPTED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
        OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
        OrderStatus.READY: frozenset({OrderStatus.COMPLETED}),
        OrderStatus.COMPLETED: frozenset(),
        OrderStatus.CANCELLED: frozenset(),
    }

    # Only these transitions get celebratory feedback
    CONFIRMATION_KINDS = {
        OrderStatus.ACCEPTED: ConfirmationKind.ORDER_ACCEPTED,
        OrderStatus.READY: ConfirmationKind.ORDER_READY,
    }

    INITIAL_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.ACCEPTED})

    @staticmethod
    def _coerce_status(value) -> OrderStatus:
        if value not in OrderStatus.values:
            raise ValueError(f"'{value}' is not a valid order status.")
        return OrderStatus(value)

    @classmethod
    def allowed_transitions(cls, status) -> FrozenSet[OrderStatus]:
        return cls.VALID_STATUS_TRANSITIONS[cls._coerce_status(status)]

    @classmethod
    def can_transition(cls, current, target) -> bool:
        current, target = cls._coerce_status(current), cls._coerce_status(target)
        return current == target or target in cls.VALID_STATUS_TRANSITIONS[current]

    @classmethod
    def is_terminal(cls, status) -> bool:
        return not cls.allowed_transitions(status)

    @classmethod
    def transition(
        cls,
        order: Order,
        target_status,
        now: Optional[datetime] = None,
        message: Optional[str] = None,
        actor=OrderActor.BUSINESS,
    ) -> TransitionResult:
        """
        Move an order to ``target_status`` and record it on the order timeline.

        ``message`` is stored on the timeline entry; a cancellation without
        one records DEFAULT_CANCELLATION_REASON.

        Moving to the status the order already has is a no-op success: the
        order comes back unchanged, no confirmation is produced and no
        signal is sent.

        Raises:
            ValueError: If target_status is not an OrderStatus value.
            IllegalTransitionError: If the lifecycle does not allow the move.
        """
        target_status = cls._coerce_status(target_status)
        current_status = order.status

        if target_status == current_status:
            logger.debug(f"Order {order.order_number} already {current_status}; nothing to do")
            return TransitionResult(order=order, previous_status=current_status, changed=False)

        if target_status not in cls.VALID_STATUS_TRANSITIONS[current_status]:
            logger.warning(
                f"Rejected transition for order {order.order_number}: "
                f"{current_status} -> {target_status}"
            )
            raise IllegalTransitionError(current_status, target_status)

        now = now or timezone.now()
        message = (message or "").strip() or None
        if message is None and target_status == OrderStatus.CANCELLED:
            message = DEFAULT_CANCELLATION_REASON
        entry = OrderTimelineEntry(
            status=target_status, timestamp=now, message=message, actor=OrderActor(actor)
        )
        updated = replace(
            order, status=target_status, updated_at=now, timeline=order.timeline + (entry,)
        )

        confirmation = None
        kind = cls.CONFIRMATION_KINDS.get(target_status)
        if kind is not None:
            confirmation = ConfirmationEvent(
                kind=kind, order_number=order.order_number, created_at=now
            )

        logger.info(f"Order {order.order_number}: {current_status} -> {target_status}")

        order_status_changed.send(
            sender=cls,
            order=updated,
            previous_status=current_status,
            confirmation=confirmation,
            message=message,
        )

        return TransitionResult(
            order=updated,
            previous_status=current_status,
            confirmation=confirmation,
        )
