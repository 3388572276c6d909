"""Shared test helpers for RoundTimer."""

from roundtimer.timer.engine import TimerEngine


class FakeClock:
    """Callable wall clock in ms that only moves when told to."""

    def __init__(self, now: float = 0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms

    def set(self, ms: float) -> None:
        self.now = ms


class FakeAudio:
    """Records calls instead of playing anything."""

    def __init__(self):
        self.initialized = 0
        self.soon = 0
        self.finish = 0

    def initialize(self):
        self.initialized += 1

    def play_soon(self):
        self.soon += 1

    def play_finish(self):
        self.finish += 1


class StateCollector:
    """Subscriber that keeps every snapshot it is handed."""

    def __init__(self):
        self.items: list = []

    def __call__(self, state):
        self.items.append(state)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_ticks(engine: TimerEngine, clock: FakeClock, ms: float, step: float = 33) -> None:
    """Advance *clock* by *ms* in *step* increments, ticking after each.

    Stops early once the engine is no longer running.
    """
    end = clock.now + ms
    while clock.now < end and engine.is_running:
        clock.advance(min(step, end - clock.now))
        engine._on_tick()
