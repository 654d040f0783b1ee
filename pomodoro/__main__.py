"""Allow running Pomodoro as a module: python -m pomodoro."""

import sys

from loguru import logger
from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from .audio.sounds import SoundManager
from .logging_setup import setup_logging
from .notifications import LogNotifier, TrayNotifier
from .settings import load_settings, save_settings, settings_path
from .timer.clock import QtClock
from .timer.engine import InvalidConfiguration, SessionTimerEngine
from .tray import TrayController


def build_notifier(tray, sounds, settings, *, tray_available: bool):
    """Tray balloon when a system tray exists, otherwise the log."""
    if tray_available:
        return TrayNotifier(tray, sounds, enabled=settings.notifications_enabled)
    logger.warning("No system tray available; alerts go to the log")
    return LogNotifier()


def main() -> None:
    settings = load_settings()
    if not settings_path().exists():
        # first launch: leave an editable file behind
        save_settings(settings)
    setup_logging(settings.log_level)

    try:
        config = settings.to_config()
    except InvalidConfiguration as exc:
        logger.error("Bad timer settings: {}", exc)
        sys.exit(2)

    app = QApplication(sys.argv)
    app.setApplicationName("Pomodoro")
    app.setOrganizationName("Pomodoro")
    app.setQuitOnLastWindowClosed(False)

    clock = QtClock(app)
    sounds = SoundManager(
        app,
        volume=settings.sound_volume,
        enabled=settings.sound_enabled,
    )

    tray = QSystemTrayIcon(app)
    notifier = build_notifier(
        tray, sounds, settings,
        tray_available=QSystemTrayIcon.isSystemTrayAvailable(),
    )

    engine = SessionTimerEngine(config, clock, notifier)
    app.aboutToQuit.connect(engine.dispose)

    controller = TrayController(engine, tray)
    controller.show()
    logger.info(
        "Pomodoro ready: {}s work / {}s break",
        config.work_duration_seconds,
        config.break_duration_seconds,
    )

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
