"""Session-ended alerts.

The engine fires ``notify_session_ended`` and moves on; whatever goes
wrong while delivering the alert is logged here and never reaches it.
"""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from .timer.engine import SessionKind


MESSAGES: dict[SessionKind, tuple[str, str]] = {
    SessionKind.WORK: ("Work Session Complete", "Time to take a break!"),
    SessionKind.BREAK: ("Break Session Complete", "Time to get back to work!"),
}


def message_for(ended_kind: SessionKind) -> tuple[str, str]:
    """``(title, body)`` for the session that just ended."""
    return MESSAGES[ended_kind]


class MessageSink(Protocol):
    """Anything with ``QSystemTrayIcon.showMessage``'s shape."""

    def showMessage(self, title: str, msg: str) -> None: ...


class SoundPlayer(Protocol):
    def play_session_end(self, ended_kind: SessionKind) -> None: ...


class LogNotifier:
    """Writes the alert to the log.  Used when there is no system tray."""

    def notify_session_ended(self, ended_kind: SessionKind) -> None:
        title, body = message_for(ended_kind)
        logger.info("{}: {}", title, body)


class TrayNotifier:
    """Tray balloon plus an optional sound."""

    def __init__(
        self,
        tray: MessageSink,
        sounds: SoundPlayer | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        self._tray = tray
        self._sounds = sounds
        self.enabled = enabled

    def notify_session_ended(self, ended_kind: SessionKind) -> None:
        if self._sounds is not None:
            try:
                self._sounds.play_session_end(ended_kind)
            except Exception:
                logger.exception("Could not play {} sound", ended_kind.value)

        if not self.enabled:
            return
        title, body = message_for(ended_kind)
        try:
            self._tray.showMessage(title, body)
        except Exception:
            logger.exception("Notification error for {!r}", title)
