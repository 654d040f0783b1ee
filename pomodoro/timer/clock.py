"""Tick sources for the session engine.

A clock hands out subscriptions: each one calls ``callback`` every
``interval_seconds`` until it is cancelled.  ``QtClock`` backs every
subscription with its own repeating ``QTimer`` so it lives on the Qt
event loop.
"""

from __future__ import annotations

import itertools
from typing import Callable, Protocol

from loguru import logger
from PyQt6.QtCore import QObject, QTimer


class SubscriptionHandle:
    """Opaque token returned by ``Clock.subscribe``."""

    _ids = itertools.count(1)

    def __init__(self, interval_seconds: float) -> None:
        self.id: int = next(self._ids)
        self.interval_seconds = interval_seconds
        self.cancelled: bool = False

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"<SubscriptionHandle #{self.id} every {self.interval_seconds}s {state}>"


class Clock(Protocol):
    def subscribe(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> SubscriptionHandle: ...

    def cancel(self, handle: SubscriptionHandle) -> None: ...


class QtClock(QObject):
    """Clock driven by ``QTimer``.  Needs a running Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timers: dict[int, QTimer] = {}

    @property
    def active_count(self) -> int:
        return len(self._timers)

    def subscribe(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> SubscriptionHandle:
        if interval_seconds <= 0:
            raise ValueError(f"interval must be > 0, got {interval_seconds}")
        handle = SubscriptionHandle(interval_seconds)
        timer = QTimer(self)
        timer.setInterval(int(interval_seconds * 1000))
        timer.timeout.connect(callback)
        self._timers[handle.id] = timer
        timer.start()
        logger.debug("Subscribed {}", handle)
        return handle

    def cancel(self, handle: SubscriptionHandle) -> None:
        handle.cancelled = True
        timer = self._timers.pop(handle.id, None)
        if timer is None:
            return
        timer.stop()
        # may be called from inside this timer's own timeout slot
        timer.deleteLater()
        logger.debug("Cancelled {}", handle)

