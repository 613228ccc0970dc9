"""Ephemeral acknowledgements shown after specific order status changes."""

from dataclasses import dataclass
from datetime import datetime

from django.db import models
from django.utils.translation import gettext_lazy as _


class ConfirmationKind(models.TextChoices):
    ORDER_ACCEPTED = "ORDER_ACCEPTED", _("¡Orden Aceptada!")
    ORDER_READY = "ORDER_READY", _("¡Orden Lista!")


@dataclass(frozen=True)
class ConfirmationEvent:
    """Not persisted; owned by whichever presenter displays it."""

    kind: ConfirmationKind
    order_number: str
    created_at: datetime

    @property
    def title(self) -> str:
        return str(self.kind.label)
