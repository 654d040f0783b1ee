"""Session-end sounds, synthesized with numpy and played via QSoundEffect.

Each sound is rendered once as a 16-bit mono WAV into the app support
directory and reused on later launches.

Sound names
-----------
- ``work_complete``  — rising C-major arpeggio, time for a break
- ``break_complete`` — soft A4 bell, back to work
"""

from __future__ import annotations

import io
import wave
from pathlib import Path
from typing import Callable

import numpy as np
from loguru import logger

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_SUPPORT_DIR
from ..timer.engine import SessionKind


SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100

SOUND_NAMES = ("work_complete", "break_complete")

SESSION_END_SOUNDS: dict[SessionKind, str] = {
    SessionKind.WORK: "work_complete",
    SessionKind.BREAK: "break_complete",
}


# ── synthesis helpers ────────────────────────────────────────────────────


def _envelope(
    length: int,
    attack: int,
    decay: int,
    sustain_level: float,
    release: int,
) -> np.ndarray:
    """ADSR envelope, durations in samples."""
    env = np.full(length, sustain_level, dtype=np.float64)
    a = min(attack, length)
    if a:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    r_start = max(length - release, d_end)
    if r_start < length:
        env[r_start:] = np.linspace(sustain_level, 0.0, length - r_start)
    return env


def _tone(freq: float, seconds: float) -> np.ndarray:
    t = np.arange(int(SAMPLE_RATE * seconds)) / SAMPLE_RATE
    return np.sin(2 * np.pi * freq * t)


def _silence(seconds: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * seconds))


def to_wav_bytes(samples: np.ndarray) -> bytes:
    """Float samples in -1..1 → 16-bit PCM mono WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


# ── generators ───────────────────────────────────────────────────────────


def generate_work_complete() -> bytes:
    notes = (523.25, 659.25, 783.99, 1046.50)  # C5 E5 G5 C6
    parts: list[np.ndarray] = []
    for freq in notes[:-1]:
        tone = _tone(freq, 0.10) * 0.5
        parts.append(tone * _envelope(len(tone), 60, 150, 0.3, 200))
        parts.append(_silence(0.02))
    last = _tone(notes[-1], 0.35) * 0.5
    parts.append(last * _envelope(len(last), 80, 300, 0.5, 600))
    return to_wav_bytes(np.concatenate(parts))


def generate_break_complete() -> bytes:
    bell = _tone(440.0, 1.0) * 0.35 + _tone(880.0, 1.0) * 0.08
    env = _envelope(
        len(bell),
        attack=int(SAMPLE_RATE * 0.08),
        decay=int(SAMPLE_RATE * 0.3),
        sustain_level=0.25,
        release=int(SAMPLE_RATE * 0.55),
    )
    return to_wav_bytes(bell * env)


GENERATORS: dict[str, Callable[[], bytes]] = {
    "work_complete": generate_work_complete,
    "break_complete": generate_break_complete,
}


# ── playback ─────────────────────────────────────────────────────────────


class SoundManager(QObject):
    """Renders, caches and plays the session-end sounds.

    Usage::

        sounds = SoundManager(parent=app)
        sounds.set_volume(70)
        sounds.play_session_end(SessionKind.WORK)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
        volume: int = 70,
        enabled: bool = True,
    ) -> None:
        super().__init__(parent)
        self._enabled = enabled
        self._volume = max(0, min(volume, 100)) / 100.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._write_missing_files()
        self._load_effects()

    @property
    def volume(self) -> int:
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def sounds_dir(self) -> Path:
        return self._sounds_dir

    def set_volume(self, level: int) -> None:
        """Set volume (0-100), clamped."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("No sound loaded for {!r}", name)
            return
        effect.play()

    def play_session_end(self, ended_kind: SessionKind) -> None:
        self.play(SESSION_END_SOUNDS[ended_kind])

    def _write_missing_files(self) -> None:
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, generate in GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(generate())
                logger.debug("Rendered {}", path)

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            effect.setVolume(self._volume)
            self._effects[name] = effect
