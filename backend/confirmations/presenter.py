"""
Single-slot, auto-expiring confirmation display.

A presented event stays visible for ``visible_seconds`` (2.5s by default),
then spends ``exit_seconds`` (0.3s) in the exit phase before it is dismissed
and the completion callback runs. Presenting a new event supersedes the
current one: its pending timer is cancelled, never stacked.
"""

from threading import Lock, RLock, Timer
from typing import Callable, Optional
import logging

from django.conf import settings
from django.db import models

from .events import ConfirmationEvent

logger = logging.getLogger(__name__)

DEFAULT_VISIBLE_SECONDS = 2.5
DEFAULT_EXIT_SECONDS = 0.3


class PresenterState(models.TextChoices):
    IDLE = "IDLE"
    VISIBLE = "VISIBLE"
    EXITING = "EXITING"
    DISMISSED = "DISMISSED"


class ConfirmationPresenter:
    """
    Holds at most one confirmation and at most one pending dismissal.

    Every present/cancel bumps a generation counter; a timer callback whose
    generation is stale does nothing, so a superseded or cancelled timer can
    never dismiss the current event or invoke the completion callback.

    Listeners (``on_change``, ``on_dismissed``) are called one at a time and in
    state order: VISIBLE, then EXITING, then DISMISSED for the same event.
    They may call back into the presenter from the same thread.
    """

    def __init__(
        self,
        on_dismissed: Optional[Callable[[ConfirmationEvent], None]] = None,
        on_change: Optional[Callable[[str, Optional[ConfirmationEvent]], None]] = None,
        visible_seconds: Optional[float] = None,
        exit_seconds: Optional[float] = None,
        timer_factory=Timer,
    ):
        self.on_dismissed = on_dismissed
        self.on_change = on_change
        self.visible_seconds = (
            visible_seconds if visible_seconds is not None
            else getattr(settings, 'CONFIRMATION_VISIBLE_SECONDS', DEFAULT_VISIBLE_SECONDS)
        )
        self.exit_seconds = (
            exit_seconds if exit_seconds is not None
            else getattr(settings, 'CONFIRMATION_EXIT_SECONDS', DEFAULT_EXIT_SECONDS)
        )
        self._timer_factory = timer_factory
        self._lock = Lock()
        # Held while a state change is announced, so listeners see states in order
        self._notify_lock = RLock()
        self._generation = 0
        self._timer = None
        self._event: Optional[ConfirmationEvent] = None
        self._state = PresenterState.IDLE

    @property
    def lifetime_seconds(self) -> float:
        return self.visible_seconds + self.exit_seconds

    @property
    def state(self) -> str:
        return self._state

    @property
    def current(self) -> Optional[ConfirmationEvent]:
        return self._event

    @property
    def is_visible(self) -> bool:
        return self._state == PresenterState.VISIBLE

    def present(self, event: Optional[ConfirmationEvent]) -> bool:
        """
        Show an event, replacing whatever is on screen.

        Returns False when there is nothing to show (transitions without
        celebratory feedback produce no event).
        """
        if event is None:
            return False

        with self._notify_lock:
            with self._lock:
                superseded = self._event
                self._cancel_timer()
                self._generation += 1
                self._event = event
                self._state = PresenterState.VISIBLE
                timer = self._new_timer(self.visible_seconds, self._begin_exit, self._generation)

            if superseded is not None:
                logger.debug(f"Confirmation for order {superseded.order_number} superseded")
            self._notify(PresenterState.VISIBLE, event)
            self._start_if_current(timer)
        return True

    def cancel(self) -> bool:
        """
        Drop the pending dismissal without running the completion callback.

        Returns True if something was pending.
        """
        with self._notify_lock:
            with self._lock:
                if self._timer is None:
                    return False
                self._cancel_timer()
                self._generation += 1
                event = self._event
                self._event = None
                self._state = PresenterState.IDLE

            self._notify(PresenterState.IDLE, event)
        return True

    def _new_timer(self, delay: float, callback, generation: int):
        timer = self._timer_factory(delay, callback, args=(generation,))
        timer.daemon = True
        self._timer = timer
        return timer

    def _start_if_current(self, timer) -> None:
        # Started after the state was announced; a listener may have superseded it
        with self._lock:
            if timer is not self._timer:
                return
        timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _begin_exit(self, generation: int) -> None:
        with self._notify_lock:
            with self._lock:
                if generation != self._generation:
                    return
                event = self._event
                self._state = PresenterState.EXITING
                timer = self._new_timer(self.exit_seconds, self._finish, generation)

            self._notify(PresenterState.EXITING, event)
            self._start_if_current(timer)

    def _finish(self, generation: int) -> None:
        with self._notify_lock:
            with self._lock:
                if generation != self._generation:
                    return
                event = self._event
                self._timer = None
                self._event = None
                self._state = PresenterState.DISMISSED

            self._notify(PresenterState.DISMISSED, event)
            if self.on_dismissed is not None:
                self.on_dismissed(event)

    def _notify(self, state: str, event: Optional[ConfirmationEvent]) -> None:
        if self.on_change is not None:
            self.on_change(state, event)
