"""
Orders services package.

- OrderStatusMachine: canonical order lifecycle and transition events
- OrderIntakeService: advisory checks for new orders (hours, throughput, ready-time quote)
"""

from .status_machine import OrderStatusMachine, TransitionResult
from .intake_service import OrderIntakeService, IntakeDecision

__all__ = [
    'OrderStatusMachine',
    'TransitionResult',
    'OrderIntakeService',
    'IntakeDecision',
]
