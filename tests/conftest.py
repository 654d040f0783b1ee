"""Shared pytest fixtures for Pomodoro tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from loguru import logger
from PyQt6.QtWidgets import QApplication

from pomodoro.timer.engine import SessionConfig, SessionTimerEngine

from helpers import ManualClock, RecordingNotifier


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real settings file."""
    monkeypatch.setenv("POMODORO_SETTINGS", str(tmp_path / "settings.json"))
    yield


@pytest.fixture
def log_messages():
    """Capture loguru output as a list of formatted records."""
    records: list = []
    handler_id = logger.add(records.append, level="DEBUG", format="{level}|{message}")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def restore_logger():
    """Put loguru back to its default stderr sink after setup_logging()."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def config():
    """Standard 25/5 Pomodoro."""
    return SessionConfig(work_duration_seconds=25 * 60, break_duration_seconds=5 * 60)


@pytest.fixture
def short_config():
    """Tiny durations so whole cycles fit in a handful of ticks."""
    return SessionConfig(work_duration_seconds=3, break_duration_seconds=2)


@pytest.fixture
def engine(config, clock, notifier):
    eng = SessionTimerEngine(config, clock, notifier)
    yield eng
    eng.dispose()


@pytest.fixture
def short_engine(short_config, clock, notifier):
    eng = SessionTimerEngine(short_config, clock, notifier)
    yield eng
    eng.dispose()
