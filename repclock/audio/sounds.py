"""Workout cues synthesized with numpy and played through QSoundEffect.

Each cue is built from sine tones shaped by an ADSR envelope, written
once as a 16-bit mono WAV into the cache directory, then loaded as a
``QSoundEffect``.

Cues
----
- ``start``    — rising triad, workout begins
- ``complete`` — four-note arpeggio with a held top note
- ``rest``     — low bell, rest interval begins
- ``warning``  — three short ticks, rest almost over
- ``click``    — tiny tick for button feedback
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_DIR


log = logging.getLogger(__name__)

SOUNDS_DIR = APP_DIR / "sounds"

SOUND_NAMES = ("start", "complete", "rest", "warning", "click")

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _envelope(
    length: int,
    attack: int,
    decay: int,
    sustain: float,
    release: int,
) -> np.ndarray:
    """ADSR envelope, durations in samples, clipped to *length*."""
    env = np.full(length, sustain, dtype=np.float64)
    a_end = min(attack, length)
    d_end = min(a_end + decay, length)
    r_start = max(length - release, d_end)
    if a_end > 0:
        env[:a_end] = np.linspace(0.0, 1.0, a_end)
    if d_end > a_end:
        env[a_end:d_end] = np.linspace(1.0, sustain, d_end - a_end)
    if length > r_start:
        env[r_start:] = np.linspace(sustain, 0.0, length - r_start)
    return env


def _tone(
    freq: float,
    seconds: float,
    amp: float = 0.5,
    *,
    overtone: float = 0.0,
    shape: tuple[int, int, float, int] = (80, 200, 0.4, 300),
) -> np.ndarray:
    t = np.arange(int(SAMPLE_RATE * seconds)) / SAMPLE_RATE
    wave_ = np.sin(2 * np.pi * freq * t)
    if overtone:
        wave_ = wave_ + overtone * np.sin(4 * np.pi * freq * t)
    return amp * wave_ * _envelope(len(t), *shape)


def _silence(seconds: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * seconds))


def _wav_bytes(samples: np.ndarray) -> bytes:
    """Float samples in -1..1 → 16-bit PCM mono WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  CUES
# ═══════════════════════════════════════════════════════════════════════════


def _generate_start() -> bytes:
    """D5 → F#5 → A5, quick and bright."""
    parts: list[np.ndarray] = []
    for freq in (587.33, 739.99, 880.00):
        parts += [_tone(freq, 0.11, 0.55), _silence(0.025)]
    parts.append(_silence(0.05))
    return _wav_bytes(np.concatenate(parts))


def _generate_complete() -> bytes:
    """G4 → C5 → E5 → G5, last note held."""
    notes = (392.00, 523.25, 659.25)
    parts: list[np.ndarray] = []
    for freq in notes:
        parts += [_tone(freq, 0.12, 0.5, shape=(60, 150, 0.3, 200)), _silence(0.02)]
    parts.append(_tone(783.99, 0.45, 0.5, overtone=0.15, shape=(80, 400, 0.5, 900)))
    return _wav_bytes(np.concatenate(parts))


def _generate_rest() -> bytes:
    """Low bell on G4 with a soft octave, long tail."""
    n = SAMPLE_RATE
    bell = _tone(
        392.0, 1.1, 0.35, overtone=0.25,
        shape=(int(n * 0.06), int(n * 0.3), 0.25, int(n * 0.65)),
    )
    return _wav_bytes(bell)


def _generate_warning() -> bytes:
    """Three 900 Hz ticks, 150 ms apart."""
    tick = _tone(900.0, 0.05, 0.35, shape=(40, 120, 0.2, 300))
    gap = _silence(0.15)
    return _wav_bytes(np.concatenate([tick, gap, tick, gap, tick, _silence(0.05)]))


def _generate_click() -> bytes:
    tick = _tone(1400.0, 0.015, 0.2, shape=(20, 60, 0.0, 0))
    # pad so QSoundEffect does not clip the tail
    return _wav_bytes(np.concatenate([tick, _silence(0.03)]))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "start": _generate_start,
    "complete": _generate_complete,
    "rest": _generate_rest,
    "warning": _generate_warning,
    "click": _generate_click,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Generates, caches and plays the workout cues.

    Usage::

        sounds = SoundManager(parent=self)
        sounds.set_volume(70)
        sounds.play("rest")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
        enabled: bool = True,
        volume: int = 70,
    ) -> None:
        super().__init__(parent)
        self._enabled = enabled
        self._volume = 0.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()
        self.set_volume(volume)

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self.stop()

    def play(self, name: str) -> None:
        """Play a cue by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            log.warning("unknown sound cue: %s", name)
            return
        self.stop()
        effect.play()

    def stop(self) -> None:
        for effect in self._effects.values():
            if effect.isPlaying():
                effect.stop()

    def has_sound(self, name: str) -> bool:
        return name in self._effects

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, generate in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(generate())

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                self._effects[name] = effect
