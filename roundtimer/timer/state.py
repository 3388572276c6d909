"""Timer state record and the pure functions that shape it.

Phases
------
IDLE    Not running, clock shows the full round time.
WORK    Counting down (running or paused).

Nothing in here mutates or schedules anything.  The engine composes these
functions with wall-clock reads; ``create_phase_transition`` is the only
place that reads the clock itself, and only when no timestamp is passed in.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from enum import Enum


# ── constants (milliseconds) ──────────────────────────────────────────────

SECOND = 1000
MINUTE = 60 * SECOND
RENDER_RATE = 1000 / 30  # ~33 ms, 30 Hz tick
SOON_TIME = 10 * SECOND
MIN_ROUND_TIME = 30 * SECOND
DEFAULT_ROUND_TIME = 5 * MINUTE


class Phase(Enum):
    IDLE = "idle"
    WORK = "work"


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the timer.  Frozen, so it can be handed to callers as-is."""

    is_running: bool
    time_left: float  # may dip below 0 until the transition is processed
    phase: Phase
    start_time: float | None
    session_start_time: float | None
    round_time: int
    soon_sound_played: bool


def now_ms() -> int:
    """Wall-clock time in integer milliseconds."""
    return int(time.time() * 1000)


def create_initial_state(round_time: int) -> TimerState:
    return TimerState(
        is_running=False,
        time_left=round_time,
        phase=Phase.IDLE,
        start_time=None,
        session_start_time=None,
        round_time=round_time,
        soon_sound_played=False,
    )


def validate_settings(round_time: int) -> dict[str, int]:
    """Clamp *round_time* up to ``MIN_ROUND_TIME``.  Never raises."""
    return {"round_time": max(MIN_ROUND_TIME, round_time)}


def get_current_phase_duration(state: TimerState) -> int:
    # Work is the only phase with a duration; Idle reuses it for arithmetic.
    return state.round_time


def should_transition_phase(state: TimerState) -> bool:
    return state.time_left <= 0


def create_phase_transition(
    state: TimerState, new_phase: Phase, now: float | None = None,
) -> TimerState:
    """Return a copy of *state* moved into *new_phase*.

    The cue latch is always cleared.  Entering WORK refills the clock;
    entering IDLE also stops it and drops both timestamps.
    """
    if now is None:
        now = now_ms()

    updates: dict = {
        "phase": new_phase,
        "start_time": now,
        "soon_sound_played": False,
    }

    if new_phase == Phase.WORK:
        updates["time_left"] = state.round_time
    elif new_phase == Phase.IDLE:
        updates.update(
            time_left=state.round_time,
            is_running=False,
            start_time=None,
            session_start_time=None,
        )

    return replace(state, **updates)
