"""Timer engine for RoundTimer.

States
------
IDLE / stopped   Nothing ticking, clock shows the full round time.
WORK / running   QTimer firing at the render rate, ``time_left`` derived
                 from ``start_time`` on every tick.
WORK / paused    Tick loop released, ``time_left`` frozen.

Transitions
-----------
IDLE → WORK/running            (start)
WORK/running → WORK/paused     (pause)
WORK/paused → WORK/running     (start, i.e. resume)
WORK/running → IDLE            (time_left reaches 0, finish cue plays)
Any → IDLE                     (reset)

Drift correction
----------------
The engine never subtracts a fixed step per tick.  Every tick recomputes
``time_left = round_time - (now - start_time)`` from absolute timestamps,
so late or skipped ticks (slow frames, a busy event loop, a laptop lid)
cannot accumulate error.  Resuming and adjusting rewrite ``start_time``
so that projection stays consistent with the remaining time.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer

from .state import (
    DEFAULT_ROUND_TIME,
    RENDER_RATE,
    SOON_TIME,
    Phase,
    TimerState,
    create_initial_state,
    create_phase_transition,
    get_current_phase_duration,
    now_ms,
    should_transition_phase,
    validate_settings,
)

logger = logging.getLogger(__name__)


# ── constants ─────────────────────────────────────────────────────────────

TOGGLE_DEBOUNCE_MS = 100  # ignore a second toggle within this window
NOTIFY_THROTTLE_MS = 100  # minimum gap between tick notifications


# ── collaborators ─────────────────────────────────────────────────────────


class AudioCues(Protocol):
    """What the engine needs from an audio player.  All fire-and-forget."""

    def initialize(self) -> None: ...

    def play_soon(self) -> None: ...

    def play_finish(self) -> None: ...


class SilentAudio:
    """Audio collaborator that plays nothing."""

    def initialize(self) -> None:
        pass

    def play_soon(self) -> None:
        pass

    def play_finish(self) -> None:
        pass


Subscriber = Callable[[TimerState], None]


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Wall-clock driven countdown for a single work round.

    Subscribers registered with :meth:`subscribe` receive the current
    :class:`TimerState` snapshot on every notification.  Snapshots are
    frozen, so nothing a subscriber does can reach back into the engine.
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        round_time: int | None = None,
        audio: AudioCues | None = None,
        clock: Callable[[], float] = now_ms,
        tick_interval: float = RENDER_RATE,
    ) -> None:
        super().__init__(parent)

        validated = validate_settings(round_time or DEFAULT_ROUND_TIME)

        self._state: TimerState = create_initial_state(validated["round_time"])
        self._audio: AudioCues = audio if audio is not None else SilentAudio()
        self._clock = clock
        self._tick_interval = tick_interval

        self._subscribers: set[Subscriber] = set()
        self._qt_timer: QTimer | None = None

        self._last_action_time: float | None = None  # toggle debounce
        self._last_notify_time: float | None = None  # tick throttle

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def time_left(self) -> float:
        """Milliseconds left on the clock (cached projection while running)."""
        return self._state.time_left

    @property
    def round_time(self) -> int:
        return self._state.round_time

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current round."""
        duration = get_current_phase_duration(self._state)
        if duration <= 0:
            return 0.0
        elapsed = duration - self._state.time_left
        return max(0.0, min(1.0, elapsed / duration))

    @property
    def is_ticking(self) -> bool:
        return self._qt_timer is not None

    def get_state(self) -> TimerState:
        return self._state

    # ══════════════════════════════════════════════════════════════════
    #  SUBSCRIPTIONS
    # ══════════════════════════════════════════════════════════════════

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        self._subscribers.add(callback)

        def unsubscribe() -> None:
            self._subscribers.discard(callback)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self._state
        # Copy so a callback may unsubscribe itself mid-iteration.
        for callback in list(self._subscribers):
            callback(snapshot)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def update_settings(self, round_time: int | None = None) -> None:
        """Apply a new round time.  A round in progress keeps its clock."""
        validated = validate_settings(
            round_time if round_time is not None else self._state.round_time
        )
        self._state = replace(self._state, **validated)

        if self._state.phase == Phase.IDLE:
            self._state = replace(self._state, time_left=validated["round_time"])

        self._notify()

    def start(self) -> None:
        """Start a new round from IDLE, or resume a paused one."""
        if self._state.is_running:
            return

        # First user gesture: some platforms refuse audio until now.
        self._audio.initialize()

        now = self._clock()

        if self._state.phase == Phase.IDLE:
            self._transition_to_phase(Phase.WORK, now)
            self._state = replace(self._state, start_time=now)
            logger.debug("round started (%d ms)", self._state.round_time)
        else:
            duration = get_current_phase_duration(self._state)
            self._state = replace(
                self._state,
                start_time=now - (duration - self._state.time_left),
            )
            logger.debug("round resumed with %d ms left", self._state.time_left)

        self._state = replace(self._state, is_running=True)
        if self._state.session_start_time is None:
            self._state = replace(self._state, session_start_time=now)

        self._start_ticking()
        self._notify()

    def pause(self) -> None:
        if not self._state.is_running:
            return

        self._state = replace(self._state, is_running=False)
        self._stop_ticking()
        logger.debug("round paused with %d ms left", self._state.time_left)
        self._notify()

    def reset(self) -> None:
        """Back to IDLE with the full round time.  Safe to call repeatedly."""
        self._stop_ticking()
        self._state = create_initial_state(self._state.round_time)
        self._notify()

    def toggle(self) -> None:
        """Start/pause, ignoring a repeat within ``TOGGLE_DEBOUNCE_MS``."""
        now = self._clock()
        if (
            self._last_action_time is not None
            and now - self._last_action_time < TOGGLE_DEBOUNCE_MS
        ):
            return
        self._last_action_time = now

        if self._state.is_running:
            self.pause()
        else:
            self.start()

    def adjust_current_time(self, delta_ms: float) -> None:
        """Nudge the remaining time, clamped to ``[0, round_time]``."""
        duration = get_current_phase_duration(self._state)
        new_time_left = min(max(0, self._state.time_left + delta_ms), duration)

        self._state = replace(self._state, time_left=new_time_left)

        if self._state.is_running:
            now = self._clock()
            self._state = replace(
                self._state, start_time=now - (duration - new_time_left),
            )

        self._notify()

    def destroy(self) -> None:
        """Release the tick loop and all subscribers."""
        self._stop_ticking()
        self._subscribers.clear()
        self._state = replace(self._state, is_running=False)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _start_ticking(self) -> None:
        if self._qt_timer is not None:
            self._stop_ticking()

        timer = QTimer(self)
        timer.setInterval(max(1, round(self._tick_interval)))
        timer.timeout.connect(self._on_tick)
        self._qt_timer = timer
        timer.start()

    def _stop_ticking(self) -> None:
        timer = self._qt_timer
        if timer is None:
            return
        self._qt_timer = None
        timer.stop()
        timer.deleteLater()

    def _on_tick(self) -> None:
        # A tick queued before pause()/destroy() must not touch the state.
        if (
            not self._state.is_running
            or self._state.start_time is None
            or self._qt_timer is None
        ):
            return

        now = self._clock()
        duration = get_current_phase_duration(self._state)
        elapsed = now - self._state.start_time
        self._state = replace(self._state, time_left=duration - elapsed)

        if should_transition_phase(self._state):
            self._handle_phase_transition()
            return

        self._check_audio_cues()

        if (
            self._last_notify_time is None
            or now - self._last_notify_time >= NOTIFY_THROTTLE_MS
        ):
            self._last_notify_time = now
            self._notify()

    def _check_audio_cues(self) -> None:
        state = self._state
        # The lower bound keeps the window two ticks wide: a late tick
        # still catches it, a resume deep inside the last 10 s does not.
        if (
            state.phase == Phase.WORK
            and 0 < state.time_left <= SOON_TIME
            and state.time_left > SOON_TIME - self._tick_interval * 2
            and not state.soon_sound_played
        ):
            self._audio.play_soon()
            self._state = replace(state, soon_sound_played=True)

    def _handle_phase_transition(self) -> None:
        self._state = replace(self._state, time_left=0)

        if self._state.phase == Phase.WORK:
            logger.info("round finished")
            self._audio.play_finish()
            self.reset()
            return

        self._notify()

    def _transition_to_phase(self, new_phase: Phase, now: float | None = None) -> None:
        self._state = create_phase_transition(self._state, new_phase, now)
