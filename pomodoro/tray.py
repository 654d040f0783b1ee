"""System tray front end: icon, tooltip countdown and a small menu."""

from __future__ import annotations

from PyQt6.QtCore import QObject, Qt
from PyQt6.QtGui import QColor, QIcon, QImage, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from loguru import logger

from .timer.engine import SessionKind, SessionSnapshot, SessionTimerEngine


KIND_COLOURS: dict[SessionKind, str] = {
    SessionKind.WORK: "#3478F6",   # blue
    SessionKind.BREAK: "#34C759",  # green
}
IDLE_COLOUR = "#8E8E93"


def make_tray_icon(snapshot: SessionSnapshot) -> QIcon:
    """Ring showing session progress.

    - running: coloured arc grows clockwise from twelve o'clock
    - idle:    plain grey ring
    """
    size = 64
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)

    width = 8
    rect = img.rect().adjusted(width, width, -width, -width)

    p.setPen(QPen(QColor(IDLE_COLOUR), width))
    p.setBrush(Qt.BrushStyle.NoBrush)
    p.drawEllipse(rect)

    colour = KIND_COLOURS[snapshot.kind] if snapshot.running else IDLE_COLOUR
    pen = QPen(QColor(colour), width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    p.setPen(pen)
    # Qt angles are in 1/16 degree, counter-clockwise from three o'clock
    span = -int(snapshot.progress_fraction * 360 * 16)
    if span:
        p.drawArc(rect, 90 * 16, span)
    p.end()
    return QIcon(QPixmap.fromImage(img))


def tooltip_for(snapshot: SessionSnapshot) -> str:
    suffix = "" if snapshot.running else " (paused)"
    return f"{snapshot.kind.label} — {snapshot.formatted_time}{suffix}"


class TrayController(QObject):
    """Keeps a ``QSystemTrayIcon`` in sync with the engine.

    The Start/Pause action calls ``engine.start()`` in both cases; the
    engine's toggle decides which one happens.
    """

    def __init__(
        self,
        engine: SessionTimerEngine,
        tray: QSystemTrayIcon | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._tray = tray or QSystemTrayIcon(self)

        self._menu = QMenu()
        self._start_action = self._menu.addAction("Start")
        self._start_action.triggered.connect(self._engine.start)
        self._reset_action = self._menu.addAction("Reset")
        self._reset_action.triggered.connect(self._engine.reset)
        self._menu.addSeparator()
        self._quit_action = self._menu.addAction("Quit")
        self._quit_action.triggered.connect(self.quit)
        self._tray.setContextMenu(self._menu)

        self._engine.add_listener(self.refresh)
        self.refresh(self._engine.snapshot())

    @property
    def tray(self) -> QSystemTrayIcon:
        return self._tray

    @property
    def start_label(self) -> str:
        return self._start_action.text()

    def show(self) -> None:
        self._tray.show()

    def refresh(self, snapshot: SessionSnapshot) -> None:
        self._start_action.setText("Pause" if snapshot.running else "Start")
        self._tray.setToolTip(tooltip_for(snapshot))
        self._tray.setIcon(make_tray_icon(snapshot))

    def quit(self) -> None:
        """Tear the engine down before leaving the event loop."""
        logger.info("Quitting")
        self._engine.dispose()
        self._tray.hide()
        app = QApplication.instance()
        if app is not None:
            app.quit()
