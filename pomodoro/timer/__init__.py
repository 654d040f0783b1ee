"""Timer package."""

from .clock import Clock, QtClock, SubscriptionHandle
from .engine import (
    SessionTimerEngine,
    SessionConfig,
    SessionKind,
    SessionSnapshot,
    InvalidConfiguration,
    Notifier,
    format_time,
    DEFAULT_WORK_SECONDS,
    DEFAULT_BREAK_SECONDS,
    TICK_INTERVAL_SECONDS,
)

__all__ = [
    "Clock",
    "QtClock",
    "SubscriptionHandle",
    "SessionTimerEngine",
    "SessionConfig",
    "SessionKind",
    "SessionSnapshot",
    "InvalidConfiguration",
    "Notifier",
    "format_time",
    "DEFAULT_WORK_SECONDS",
    "DEFAULT_BREAK_SECONDS",
    "TICK_INTERVAL_SECONDS",
]
