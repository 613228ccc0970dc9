from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional
import logging

from business_hours.services import BusinessHoursService
from orders.models import Order, OrderStatus
from orders.stores import OrderStore, get_order_store
from settings.policy import OrderSettingsPolicy, RejectionReason

from .status_machine import OrderStatusMachine

logger = logging.getLogger(__name__)

THROUGHPUT_WINDOW = timedelta(hours=1)


@dataclass(frozen=True)
class IntakeDecision:
    """Advisory answer for the order intake path; it never blocks storage itself."""

    accepted: bool
    reason: Optional[RejectionReason] = None
    initial_status: Optional[OrderStatus] = None
    estimated_ready_minutes: Optional[int] = None

    @property
    def message(self) -> str:
        if self.accepted:
            return f"Order can be accepted as {self.initial_status}"
        return str(self.reason.label)


class OrderIntakeService:
    """Combines business hours and order settings to advise on new orders."""

    def __init__(
        self,
        policy: Optional[OrderSettingsPolicy] = None,
        hours_service: Optional[BusinessHoursService] = None,
        order_store: Optional[OrderStore] = None,
    ):
        if policy is None:
            from settings.config import app_settings
            policy = app_settings.order_settings
        self.policy = policy
        self.hours_service = hours_service or BusinessHoursService()
        self.order_store = order_store

    @staticmethod
    def initial_status(policy: OrderSettingsPolicy) -> OrderStatus:
        """Status a newly created order starts in."""
        return OrderStatus.ACCEPTED if policy.auto_accept_orders else OrderStatus.PENDING

    def current_hour_order_count(self, now: Optional[datetime] = None) -> int:
        """
        Snapshot of orders created within the rolling hour before ``now``.

        A naive ``now`` is business-local wall clock, the same as for the hours check.
        """
        now = self.hours_service.to_business_time(now)
        store = self.order_store or get_order_store()
        return store.count_created_between(now - THROUGHPUT_WINDOW, now)

    def evaluate(
        self,
        current_hour_order_count: Optional[int],
        base_item_prep_minutes: int,
        now: Optional[datetime] = None,
    ) -> IntakeDecision:
        """
        Decide whether a new order can be taken right now.

        Args:
            current_hour_order_count: Caller snapshot; None takes it from the order store.
            base_item_prep_minutes: Preparation time derived from the ordered items.
            now: Moment of the check. Defaults to the current time; naive values
                are business-local.
        """
        now = self.hours_service.to_business_time(now)
        if current_hour_order_count is None:
            current_hour_order_count = self.current_hour_order_count(now)

        decision = self.policy.can_accept_new_order(
            current_hour_order_count=current_hour_order_count,
            now=now,
            is_business_open=self.hours_service.is_open(now),
        )
        if not decision.accepted:
            return IntakeDecision(accepted=False, reason=decision.reason)

        return IntakeDecision(
            accepted=True,
            initial_status=self.initial_status(self.policy),
            estimated_ready_minutes=self.policy.quote_estimated_ready_minutes(base_item_prep_minutes),
        )

    def prepare_order(self, order: Order, decision: IntakeDecision) -> Order:
        """
        Stamp an accepted intake decision onto a freshly built order.

        Raises:
            ValueError: If the decision was a rejection or the order is not new.
        """
        if not decision.accepted:
            raise ValueError(f"Cannot prepare order {order.order_number}: {decision.message}")
        if order.status not in OrderStatusMachine.INITIAL_STATUSES:
            raise ValueError(f"Order {order.order_number} is already {order.status}")

        return replace(
            order,
            status=decision.initial_status,
            estimated_ready_minutes=decision.estimated_ready_minutes,
        )
