"""Tests for session-end sound synthesis and playback."""

from __future__ import annotations

import io
import wave

import numpy as np
import pytest

from pomodoro.audio.sounds import (
    SoundManager,
    GENERATORS,
    SESSION_END_SOUNDS,
    SOUND_NAMES,
    SAMPLE_RATE,
    generate_work_complete,
    generate_break_complete,
    to_wav_bytes,
)
from pomodoro.timer.engine import SessionKind


# ═══════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


class TestSoundGeneration:
    """Each generator produces valid WAV bytes."""

    @pytest.mark.parametrize("gen_fn", [generate_work_complete, generate_break_complete])
    def test_generator_produces_wav(self, gen_fn):
        data = gen_fn()
        assert isinstance(data, bytes)
        assert data[:4] == b"RIFF"

    @pytest.mark.parametrize("gen_fn", [generate_work_complete, generate_break_complete])
    def test_wav_is_parseable(self, gen_fn):
        with wave.open(io.BytesIO(gen_fn()), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == SAMPLE_RATE
            assert wf.getnframes() > SAMPLE_RATE // 4

    def test_bell_fades_out(self):
        with wave.open(io.BytesIO(generate_break_complete()), "rb") as wf:
            frames = np.frombuffer(wf.readframes(wf.getnframes()), dtype=np.int16)
        assert abs(int(frames[-1])) < 200

    def test_to_wav_clips_out_of_range(self):
        data = to_wav_bytes(np.array([2.0, -2.0, 0.0]))
        with wave.open(io.BytesIO(data), "rb") as wf:
            frames = np.frombuffer(wf.readframes(3), dtype=np.int16)
        assert list(frames) == [32767, -32767, 0]

    def test_every_name_has_a_generator(self):
        assert set(GENERATORS) == set(SOUND_NAMES)

    def test_every_kind_has_a_sound(self):
        assert set(SESSION_END_SOUNDS) == set(SessionKind)
        assert set(SESSION_END_SOUNDS.values()) <= set(SOUND_NAMES)


# ═══════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSoundManager:
    def test_create(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        assert mgr.enabled is True
        assert mgr.volume == 70
        assert mgr.sounds_dir == tmp_path

    def test_wav_files_generated(self, tmp_path):
        SoundManager(parent=None, sounds_dir=tmp_path)
        for name in SOUND_NAMES:
            path = tmp_path / f"{name}.wav"
            assert path.exists(), f"Missing WAV: {name}"
            assert path.stat().st_size > 100

    def test_existing_files_are_kept(self, tmp_path):
        cached = tmp_path / "work_complete.wav"
        cached.write_bytes(b"cached")
        SoundManager(parent=None, sounds_dir=tmp_path)
        assert cached.read_bytes() == b"cached"

    def test_constructor_options(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path, volume=150, enabled=False)
        assert mgr.volume == 100
        assert mgr.enabled is False

    @pytest.mark.parametrize("level, expected", [(30, 30), (200, 100), (-10, 0)])
    def test_set_volume_clamps(self, tmp_path, level, expected):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.set_volume(level)
        assert mgr.volume == expected

    def test_set_enabled(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.set_enabled(False)
        assert mgr.enabled is False

    def test_play_invalid_name_no_crash(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.play("nonexistent_sound")

    def test_play_session_end_maps_kind(self, tmp_path, monkeypatch):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        played = []
        monkeypatch.setattr(mgr, "play", played.append)
        mgr.play_session_end(SessionKind.WORK)
        mgr.play_session_end(SessionKind.BREAK)
        assert played == ["work_complete", "break_complete"]
