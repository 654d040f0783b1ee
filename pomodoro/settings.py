"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/Pomodoro/settings.json

The ``POMODORO_SETTINGS`` environment variable points somewhere else.

Usage::

    settings = load_settings()
    settings.break_duration = 10 * 60
    save_settings(settings)
    engine_config = settings.to_config()
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from loguru import logger

from .timer.engine import (
    SessionConfig,
    DEFAULT_WORK_SECONDS,
    DEFAULT_BREAK_SECONDS,
)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomodoro"
SETTINGS_ENV_VAR = "POMODORO_SETTINGS"


def settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_duration: int = DEFAULT_WORK_SECONDS      # seconds
    break_duration: int = DEFAULT_BREAK_SECONDS

    # ── alerts ────────────────────────────────────────────────────────
    notifications_enabled: bool = True
    sound_enabled: bool = True
    sound_volume: int = 70                         # 0-100

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"

    def to_config(self) -> SessionConfig:
        """Validated engine config; raises ``InvalidConfiguration``."""
        return SessionConfig(
            work_duration_seconds=self.work_duration,
            break_duration_seconds=self.break_duration,
        )


# Bad durations must reach to_config() and fail there, not be papered over
_VALIDATED_BY_CONFIG = frozenset({"work_duration", "break_duration"})


def _valid_value(name: str, value, defaults: Settings) -> bool:
    expected = type(getattr(defaults, name))
    # bool is an int subclass, so compare exact types
    if type(value) is not expected:
        return False
    if name == "log_level":
        try:
            logger.level(value.upper())
        except ValueError:
            return False
    return True


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults.

    Keys that are not settings are dropped.  Values of the wrong type, or
    an unknown ``log_level``, are replaced by their default with a warning.
    """
    path = path or settings_path()
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read {}: {}; using defaults", path, exc)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("{} does not hold a JSON object; using defaults", path)
        return Settings()
    defaults = Settings()
    loaded: dict = {}
    for f in fields(Settings):
        if f.name not in data:
            continue
        value = data[f.name]
        if f.name in _VALIDATED_BY_CONFIG or _valid_value(f.name, value, defaults):
            loaded[f.name] = value
        else:
            logger.warning(
                "Ignoring {}={!r} in {}; using {!r}",
                f.name, value, path, getattr(defaults, f.name),
            )
    return Settings(**loaded)


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
