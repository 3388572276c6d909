"""Glue between the timer engine, the settings store and the UI.

The window only talks to :class:`TimerController`: it calls the action
methods, subscribes to state snapshots, and reads the derived flags and
formatters below.  Round-time changes are persisted here, so the engine
itself never touches disk.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable

from .settings import ROUND_TIME_KEY, SettingsStore
from .timer.engine import AudioCues, Subscriber, TimerEngine
from .timer.state import (
    DEFAULT_ROUND_TIME,
    SECOND,
    SOON_TIME,
    Phase,
    TimerState,
    now_ms,
    validate_settings,
)

logger = logging.getLogger(__name__)


# ── formatters ────────────────────────────────────────────────────────────


def format_time(ms: float) -> str:
    """``MM:SS`` for a countdown.

    Seconds are rounded up, so 2999 ms still reads ``00:03`` until the
    whole second has gone.  Negative values show as ``00:00``.
    """
    total = max(0, math.ceil(ms / SECOND))
    minutes, seconds = divmod(total, 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_clock(when: datetime | None) -> str:
    """12-hour wall clock, e.g. ``9:05 pm``."""
    if when is None:
        return ""
    hours = when.hour % 12 or 12
    ampm = "pm" if when.hour >= 12 else "am"
    return f"{hours}:{when.minute:02d} {ampm}"


# ── controller ────────────────────────────────────────────────────────────


class TimerController:
    """Owns one :class:`TimerEngine` seeded from the settings store."""

    def __init__(
        self,
        store: SettingsStore,
        *,
        audio: AudioCues | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._store = store
        self._engine = TimerEngine(
            round_time=self._stored_round_time(),
            audio=audio,
            clock=clock,
        )

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def state(self) -> TimerState:
        return self._engine.get_state()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self._engine.subscribe(callback)

    # ── actions ───────────────────────────────────────────────────────

    def start(self) -> None:
        self._engine.start()

    def pause(self) -> None:
        self._engine.pause()

    def reset(self) -> None:
        self._engine.reset()

    def toggle(self) -> None:
        self._engine.toggle()

    def update_round_time(self, round_time: int) -> None:
        """Clamp, apply and persist a new round duration (ms)."""
        validated = validate_settings(round_time)["round_time"]
        self._engine.update_settings(round_time=validated)
        self._store.set(ROUND_TIME_KEY, validated)

    def change_round_time(self, delta_seconds: int) -> None:
        self.update_round_time(self.state.round_time + delta_seconds * SECOND)

    def change_current_time(self, delta_seconds: int) -> None:
        self._engine.adjust_current_time(delta_seconds * SECOND)

    def close(self) -> None:
        self._engine.destroy()

    # ── derived state ─────────────────────────────────────────────────

    @property
    def is_idle(self) -> bool:
        return self.state.phase == Phase.IDLE

    @property
    def is_ending_soon(self) -> bool:
        state = self.state
        return state.phase == Phase.WORK and state.time_left <= SOON_TIME

    @property
    def percent_complete(self) -> float:
        return self._engine.percent_complete

    @property
    def status_text(self) -> str:
        if self.state.is_running:
            return "Running"
        return "Stopped" if self.is_idle else "Paused"

    # ── internal ──────────────────────────────────────────────────────

    def _stored_round_time(self) -> int:
        value = self._store.get(ROUND_TIME_KEY, DEFAULT_ROUND_TIME)
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            logger.warning("stored round time %r is not a number; using default", value)
            return DEFAULT_ROUND_TIME
