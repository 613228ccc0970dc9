"""
Order acceptance rules configured by the merchant.

The policy is a read model: it answers whether a new order can be taken and
which ready time to quote, but never creates or mutates orders itself.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import logging

from django.db import models
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger(__name__)

DEFAULT_PREP_TIME_BUFFER_MINUTES = 5
DEFAULT_CANCELLATION_POLICY = (
    "Los pedidos pueden cancelarse hasta 10 minutos después de realizados"
)


class RejectionReason(models.TextChoices):
    CLOSED = "closed", _("The business is currently closed")
    THROUGHPUT_EXCEEDED = "throughput-exceeded", _(
        "The maximum number of orders for this hour has been reached"
    )


@dataclass(frozen=True)
class AcceptanceDecision:
    """Outcome of an acceptance check; a rejection is informational, not an error."""

    accepted: bool
    reason: Optional[RejectionReason] = None

    @classmethod
    def accept(cls) -> "AcceptanceDecision":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectionReason) -> "AcceptanceDecision":
        return cls(accepted=False, reason=reason)

    @property
    def message(self) -> str:
        if self.accepted:
            return str(_("New orders can be accepted"))
        return str(self.reason.label)


@dataclass(frozen=True)
class OrderSettingsPolicy:
    auto_accept_orders: bool = False
    prep_time_buffer_minutes: int = DEFAULT_PREP_TIME_BUFFER_MINUTES
    max_orders_per_hour: Optional[int] = None
    allow_scheduled_orders: bool = True
    cancellation_policy_text: str = DEFAULT_CANCELLATION_POLICY

    def __post_init__(self) -> None:
        if self.prep_time_buffer_minutes < 0:
            raise ValueError("Preparation buffer cannot be negative")
        if self.max_orders_per_hour is not None and self.max_orders_per_hour <= 0:
            raise ValueError("Max orders per hour must be a positive number when set")

    def can_accept_new_order(
        self, current_hour_order_count: int, now: datetime, is_business_open: bool
    ) -> AcceptanceDecision:
        """
        Decide whether a new order may be created.

        Rules are checked in order and the first failing one wins:
        closed business, then the hourly throughput cap.

        Args:
            current_hour_order_count: Point-in-time snapshot supplied by the caller.
            now: Moment of the check.
            is_business_open: Result of the business hours check for ``now``.
        """
        if not is_business_open:
            logger.info(f"Rejecting new order at {now}: business closed")
            return AcceptanceDecision.reject(RejectionReason.CLOSED)

        if (
            self.max_orders_per_hour is not None
            and current_hour_order_count >= self.max_orders_per_hour
        ):
            logger.info(
                f"Rejecting new order at {now}: {current_hour_order_count} orders "
                f"this hour (cap {self.max_orders_per_hour})"
            )
            return AcceptanceDecision.reject(RejectionReason.THROUGHPUT_EXCEEDED)

        return AcceptanceDecision.accept()

    def quote_estimated_ready_minutes(self, base_item_prep_minutes: int) -> int:
        """Base preparation time plus the configured buffer."""
        if base_item_prep_minutes < 0:
            raise ValueError("Base preparation time cannot be negative")
        return base_item_prep_minutes + self.prep_time_buffer_minutes


@dataclass(frozen=True)
class NotificationSettings:
    new_order_sound: bool = True
    order_status_updates: bool = True
    customer_messages: bool = True
    daily_summary: bool = True
