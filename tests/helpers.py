"""Shared test helpers for Pomodoro."""

from pomodoro.timer.clock import SubscriptionHandle
from pomodoro.timer.engine import SessionKind


class ManualClock:
    """Clock that only ticks when the test says so.

    ``advance(n)`` delivers *n* one-second ticks.  Callbacks are taken
    from the subscriptions alive at the start of each second, so a
    subscription created during a tick first fires on the next one.
    """

    def __init__(self):
        self._subs: dict = {}
        self.subscribe_calls = 0
        self.cancel_calls = 0

    def subscribe(self, interval_seconds, callback):
        handle = SubscriptionHandle(interval_seconds)
        self._subs[handle.id] = (handle, callback)
        self.subscribe_calls += 1
        return handle

    def cancel(self, handle):
        self.cancel_calls += 1
        handle.cancelled = True
        self._subs.pop(handle.id, None)

    @property
    def active_count(self) -> int:
        return len(self._subs)

    @property
    def handles(self) -> list:
        return [handle for handle, _ in self._subs.values()]

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            for handle, callback in list(self._subs.values()):
                if not handle.cancelled:
                    callback()


class RecordingNotifier:
    """Remembers every session-ended call."""

    def __init__(self):
        self.ended: list[SessionKind] = []

    def notify_session_ended(self, ended_kind):
        self.ended.append(ended_kind)

    def __len__(self):
        return len(self.ended)


class FailingNotifier:
    def __init__(self):
        self.calls = 0

    def notify_session_ended(self, ended_kind):
        self.calls += 1
        raise RuntimeError("notification centre unavailable")


class SnapshotCollector:
    """Engine listener that stores every snapshot it receives."""

    def __init__(self):
        self.items: list = []

    def __call__(self, snapshot):
        self.items.append(snapshot)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def state_of(engine):
    """``(kind, remaining, running)`` triple for compact assertions."""
    return (engine.kind, engine.remaining_seconds, engine.running)
