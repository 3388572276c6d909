"""Audio cues synthesised with numpy and played through QSoundEffect.

Both cues are generated as WAV files from sine tones shaped by an ADSR
envelope, then cached to disk so later launches skip synthesis.

Sound names
-----------
- ``soon``    — two soft taps, 10 s before the round ends
- ``finish``  — rising four-note arpeggio when the round completes

Nothing is generated or loaded until :meth:`SoundManager.initialize` runs,
which the engine calls on the first user-initiated start.
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

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "RoundTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = ("soon", "finish")

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
    """ADSR gain curve of *length* samples (segment lengths in samples)."""
    env = np.full(length, sustain, dtype=np.float64)

    a_end = min(attack, length)
    d_end = min(a_end + decay, length)
    r_start = max(length - release, d_end)

    if a_end > 0:
        env[:a_end] = np.linspace(0.0, 1.0, a_end)
    if d_end > a_end:
        env[a_end:d_end] = np.linspace(1.0, sustain, d_end - a_end)
    if r_start < length:
        env[r_start:] = np.linspace(sustain, 0.0, length - r_start)
    return env


def _tone(freq: float, seconds: float, amplitude: float) -> np.ndarray:
    n = int(SAMPLE_RATE * seconds)
    t = np.arange(n) / SAMPLE_RATE
    return amplitude * np.sin(2 * np.pi * freq * t)


def _silence(seconds: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * seconds))


def _encode_wav(samples: np.ndarray) -> bytes:
    """Mono 16-bit PCM WAV from floats in -1..1."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  CUE GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_soon() -> bytes:
    """Ending soon — two short 880 Hz taps, 90 ms apart."""
    tap = _tone(880.0, 0.05, 0.4)
    tap = tap * _envelope(len(tap), attack=40, decay=120, sustain=0.25, release=300)
    return _encode_wav(np.concatenate([tap, _silence(0.09), tap, _silence(0.05)]))


def _generate_finish() -> bytes:
    """Round finished — C5 E5 G5 C6, last note held with a long tail."""
    notes = (523.25, 659.25, 783.99, 1046.50)
    parts: list[np.ndarray] = []
    for freq in notes[:-1]:
        note = _tone(freq, 0.11, 0.5)
        parts.append(note * _envelope(len(note), 60, 150, 0.35, 220))
        parts.append(_silence(0.02))

    last = _tone(notes[-1], 0.4, 0.5) + _tone(notes[-1] * 2, 0.4, 0.08)
    parts.append(last * _envelope(len(last), 80, 400, 0.5, 900))
    return _encode_wav(np.concatenate(parts))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "soon": _generate_soon,
    "finish": _generate_finish,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Audio collaborator for :class:`~roundtimer.timer.engine.TimerEngine`.

    Usage::

        sounds = SoundManager(parent=self)
        sounds.set_volume(70)
        engine = TimerEngine(audio=sounds)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}
        self._initialized = False

    # ── cue API ───────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Generate and load the cues.

        Only the first successful call does work.  If the cache cannot be
        written the cues stay silent and the next call tries again.
        """
        if self._initialized:
            return
        try:
            self._ensure_wav_files()
        except OSError as exc:
            logger.warning("cannot write sound cache %s: %s", self._sounds_dir, exc)
            return
        self._load_effects()
        self._initialized = True
        logger.debug("loaded %d sound effects", len(self._effects))

    def play_soon(self) -> None:
        self.play("soon")

    def play_finish(self) -> None:
        self.play("finish")

    # ── public API ────────────────────────────────────────────────────

    def play(self, name: str) -> None:
        """Play a cue by name.  No-op if disabled, unloaded or unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is not None:
            effect.play()

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates every loaded effect."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    @property
    def volume(self) -> int:
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def initialized(self) -> bool:
        return self._initialized

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
            if not path.exists():
                continue
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            effect.setVolume(self._volume)
            self._effects[name] = effect
