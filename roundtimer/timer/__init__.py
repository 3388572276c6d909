"""Timer package."""

from .engine import (
    TimerEngine,
    AudioCues,
    SilentAudio,
    TOGGLE_DEBOUNCE_MS,
    NOTIFY_THROTTLE_MS,
)
from .state import (
    TimerState,
    Phase,
    DEFAULT_ROUND_TIME,
    MIN_ROUND_TIME,
    RENDER_RATE,
    SOON_TIME,
)

__all__ = [
    "TimerEngine",
    "AudioCues",
    "SilentAudio",
    "TOGGLE_DEBOUNCE_MS",
    "NOTIFY_THROTTLE_MS",
    "TimerState",
    "Phase",
    "DEFAULT_ROUND_TIME",
    "MIN_ROUND_TIME",
    "RENDER_RATE",
    "SOON_TIME",
]
