"""Session timer state machine for Pomodoro.

States
------
IDLE           Not running, either kind.  Remaining time is frozen.
RUNNING_WORK   Work countdown in progress.
RUNNING_BREAK  Break countdown in progress.

Transitions
-----------
IDLE → RUNNING_{WORK|BREAK}          (start)
RUNNING_* → IDLE                     (pause, or start while running)
RUNNING_* → RUNNING_*                (tick, remaining > 0)
RUNNING_* → RUNNING_{other kind}     (tick reaches 0: notify, switch, resume)
Any → IDLE                           (reset, same kind, full remaining)

There is no terminal state: the engine alternates work and break until it
is disposed.

The engine never owns a timer itself.  It asks a ``Clock`` for a 1-second
subscription when it starts and cancels it when it pauses, so at most one
tick callback is ever pending.  Everything runs on the caller's thread
(normally the Qt event loop).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from loguru import logger

from .clock import Clock, SubscriptionHandle


# ── enums ─────────────────────────────────────────────────────────────────


class SessionKind(Enum):
    WORK = "work"
    BREAK = "break"

    @property
    def other(self) -> SessionKind:
        return SessionKind.BREAK if self is SessionKind.WORK else SessionKind.WORK

    @property
    def label(self) -> str:
        return "Work Session" if self is SessionKind.WORK else "Break Session"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_WORK_SECONDS = 25 * 60
DEFAULT_BREAK_SECONDS = 5 * 60
TICK_INTERVAL_SECONDS = 1


# ── errors ────────────────────────────────────────────────────────────────


class InvalidConfiguration(ValueError):
    """Raised when a session duration is not a positive whole number."""


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SessionConfig:
    """Work/break durations in seconds.  Validated on construction."""

    work_duration_seconds: int = DEFAULT_WORK_SECONDS
    break_duration_seconds: int = DEFAULT_BREAK_SECONDS

    def __post_init__(self) -> None:
        for name in ("work_duration_seconds", "break_duration_seconds"):
            value = getattr(self, name)
            # bool is an int subclass; True is not a duration
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(
                    f"{name} must be an integer, got {value!r}"
                )
            if value <= 0:
                raise InvalidConfiguration(f"{name} must be > 0, got {value}")

    def duration_for(self, kind: SessionKind) -> int:
        if kind is SessionKind.WORK:
            return self.work_duration_seconds
        return self.break_duration_seconds


@dataclass(frozen=True)
class SessionSnapshot:
    kind: SessionKind
    remaining_seconds: int
    running: bool
    progress_fraction: float

    @property
    def formatted_time(self) -> str:
        return format_time(self.remaining_seconds)


def format_time(seconds: int) -> str:
    """``MM:SS`` with both fields zero-padded to two digits."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class Notifier(Protocol):
    def notify_session_ended(self, ended_kind: SessionKind) -> None: ...


Listener = Callable[[SessionSnapshot], None]


# ── engine ────────────────────────────────────────────────────────────────


class SessionTimerEngine:
    """Work/break countdown that switches sessions automatically.

    ``start()`` is a toggle: calling it while running pauses, exactly like
    the single Start/Pause button it backs.  When a countdown reaches zero
    the engine notifies, flips to the other session kind and starts again
    on the same call stack.

    Listeners registered with :meth:`add_listener` receive a
    :class:`SessionSnapshot` after every state change.
    """

    def __init__(
        self,
        config: SessionConfig,
        clock: Clock,
        notifier: Notifier,
    ) -> None:
        self._config = config
        self._clock = clock
        self._notifier = notifier

        self._kind: SessionKind = SessionKind.WORK
        self._remaining: int = config.duration_for(SessionKind.WORK)
        self._running: bool = False

        self._subscription: SubscriptionHandle | None = None
        self._listeners: list[Listener] = []
        self._disposed: bool = False

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def kind(self) -> SessionKind:
        return self._kind

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._running

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def total_duration(self) -> int:
        return self._config.duration_for(self._kind)

    @property
    def progress_fraction(self) -> float:
        """0.0 → 1.0 progress through the current session."""
        total = self.total_duration
        return max(0.0, min(1.0, 1.0 - self._remaining / total))

    @property
    def formatted_time(self) -> str:
        return format_time(self._remaining)

    def duration_for(self, kind: SessionKind) -> int:
        return self._config.duration_for(kind)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            kind=self._kind,
            remaining_seconds=self._remaining,
            running=self._running,
            progress_fraction=self.progress_fraction,
        )

    # ── listeners ─────────────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start counting down, or pause if already running."""
        if self._disposed:
            raise RuntimeError("start() called on a disposed SessionTimerEngine")
        if self._running:
            self.pause()
            return
        self._subscription = self._clock.subscribe(
            TICK_INTERVAL_SECONDS, self.tick
        )
        self._running = True
        logger.debug("Started {} with {}s left", self._kind.value, self._remaining)
        self._emit()

    def pause(self) -> None:
        """Stop counting down.  Safe to call when already paused."""
        was_running = self._running
        self._running = False
        self._release_subscription()
        if was_running:
            logger.debug("Paused {} at {}s", self._kind.value, self._remaining)
            self._emit()

    def reset(self) -> None:
        """Pause and refill the current session.  Kind is kept."""
        self.pause()
        self._remaining = self.total_duration
        self._emit()

    def tick(self) -> None:
        """Advance one second.  Called by the clock while running."""
        if self._disposed or not self._running:
            return
        if self._remaining > 0:
            self._remaining -= 1
        if self._remaining == 0:
            self._finish_session()
        else:
            self._emit()

    def dispose(self) -> None:
        """Cancel the pending tick subscription and detach listeners."""
        if self._disposed:
            return
        self._running = False
        self._release_subscription()
        self._listeners.clear()
        self._disposed = True
        logger.debug("SessionTimerEngine disposed")

    def __enter__(self) -> SessionTimerEngine:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _finish_session(self) -> None:
        ended = self._kind
        logger.info("{} ended", ended.label)
        self._notify(ended)

        # same as pause() minus the listener emit; start() reports the switch
        self._running = False
        self._release_subscription()
        self._kind = ended.other
        self._remaining = self.total_duration
        self.start()

    def _notify(self, ended: SessionKind) -> None:
        try:
            self._notifier.notify_session_ended(ended)
        except Exception:
            logger.exception("Notifier failed for ended {} session", ended.value)

    def _release_subscription(self) -> None:
        if self._subscription is not None:
            handle, self._subscription = self._subscription, None
            self._clock.cancel(handle)

    def _emit(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Listener {!r} failed", listener)
