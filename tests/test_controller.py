"""Tests for the controller, its formatters, and the timer window."""

from datetime import datetime

import pytest

from roundtimer.controller import TimerController, format_clock, format_time
from roundtimer.settings import SettingsStore, ROUND_TIME_KEY
from roundtimer.timer.state import DEFAULT_ROUND_TIME, MIN_ROUND_TIME, MINUTE, Phase
from roundtimer.ui.timer_window import TimerWindow

from helpers import StateCollector


@pytest.fixture
def store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def controller(qapp, store, clock, audio):
    ctl = TimerController(store, audio=audio, clock=clock)
    yield ctl
    ctl.close()


# ═══════════════════════════════════════════════════════════════════════
#  FORMATTERS
# ═══════════════════════════════════════════════════════════════════════


class TestFormatTime:

    @pytest.mark.parametrize("ms,expected", [
        (0, "00:00"),
        (1, "00:01"),
        (999, "00:01"),
        (1000, "00:01"),
        (2999, "00:03"),
        (59_001, "01:00"),
        (5 * MINUTE, "05:00"),
        (100 * MINUTE, "100:00"),
        (-500, "00:00"),
    ])
    def test_format(self, ms, expected):
        assert format_time(ms) == expected


class TestFormatClock:

    @pytest.mark.parametrize("hour,minute,expected", [
        (0, 0, "12:00 am"),
        (9, 5, "9:05 am"),
        (12, 30, "12:30 pm"),
        (21, 5, "9:05 pm"),
    ])
    def test_format(self, hour, minute, expected):
        assert format_clock(datetime(2024, 1, 1, hour, minute)) == expected

    def test_none(self):
        assert format_clock(None) == ""


# ═══════════════════════════════════════════════════════════════════════
#  CONTROLLER
# ═══════════════════════════════════════════════════════════════════════


class TestSeeding:

    def test_default_when_store_empty(self, controller):
        assert controller.state.round_time == DEFAULT_ROUND_TIME

    def test_seeded_from_store(self, qapp, store):
        store.set(ROUND_TIME_KEY, 90_000)
        ctl = TimerController(store)
        assert ctl.state.round_time == 90_000
        assert ctl.state.time_left == 90_000
        ctl.close()

    def test_stored_value_below_minimum_clamped(self, qapp, store):
        store.set(ROUND_TIME_KEY, 1000)
        ctl = TimerController(store)
        assert ctl.state.round_time == MIN_ROUND_TIME
        ctl.close()

    def test_garbage_stored_value_uses_default(self, qapp, store):
        store.set(ROUND_TIME_KEY, "soon")
        ctl = TimerController(store)
        assert ctl.state.round_time == DEFAULT_ROUND_TIME
        ctl.close()

    def test_infinite_stored_value_uses_default(self, qapp, store):
        store.path.write_text('{"round_time": Infinity}', encoding="utf-8")
        ctl = TimerController(SettingsStore(store.path))
        assert ctl.state.round_time == DEFAULT_ROUND_TIME
        ctl.close()


class TestActions:

    def test_update_round_time_persists(self, controller, store):
        controller.update_round_time(2 * MINUTE)
        assert controller.state.round_time == 2 * MINUTE
        assert SettingsStore(store.path).get(ROUND_TIME_KEY) == 2 * MINUTE

    def test_update_round_time_persists_clamped_value(self, controller, store):
        controller.update_round_time(10)
        assert store.get(ROUND_TIME_KEY) == MIN_ROUND_TIME

    def test_change_round_time(self, controller):
        controller.change_round_time(30)
        assert controller.state.round_time == DEFAULT_ROUND_TIME + 30_000
        controller.change_round_time(-60)
        assert controller.state.round_time == DEFAULT_ROUND_TIME - 30_000

    def test_change_current_time(self, controller):
        controller.change_current_time(-10)
        assert controller.state.time_left == DEFAULT_ROUND_TIME - 10_000

    def test_start_pause_reset(self, controller, clock):
        controller.start()
        assert controller.state.is_running
        clock.advance(1000)
        controller.pause()
        assert controller.state.phase == Phase.WORK
        controller.reset()
        assert controller.state.phase == Phase.IDLE

    def test_toggle(self, controller):
        controller.toggle()
        assert controller.state.is_running

    def test_subscribe(self, controller):
        c = StateCollector()
        unsubscribe = controller.subscribe(c)
        controller.start()
        unsubscribe()
        controller.pause()
        assert len(c) == 1

    def test_close_stops_engine(self, controller):
        controller.start()
        controller.close()
        assert controller.state.is_running is False
        assert controller.engine.is_ticking is False


class TestDerived:

    def test_status_text(self, controller):
        assert controller.status_text == "Stopped"
        controller.start()
        assert controller.status_text == "Running"
        controller.pause()
        assert controller.status_text == "Paused"

    def test_is_idle(self, controller):
        assert controller.is_idle
        controller.start()
        assert not controller.is_idle

    def test_is_ending_soon(self, controller, clock):
        controller.start()
        assert not controller.is_ending_soon
        clock.set(DEFAULT_ROUND_TIME - 10_000)
        controller.engine._on_tick()
        assert controller.is_ending_soon

    def test_idle_is_never_ending_soon(self, controller):
        controller.change_current_time(-DEFAULT_ROUND_TIME)
        assert not controller.is_ending_soon


# ═══════════════════════════════════════════════════════════════════════
#  WINDOW
# ═══════════════════════════════════════════════════════════════════════


class TestTimerWindow:

    def test_initial_labels(self, controller):
        win = TimerWindow(controller)
        assert win._status_label.text() == "Stopped"
        assert win._time_label.text() == "05:00"
        assert win._duration_label.text() == "05:00"
        assert win._toggle_btn.text() == "Start"

    def test_toggle_button(self, controller):
        win = TimerWindow(controller)
        win._toggle_btn.click()
        assert controller.state.is_running
        assert win._toggle_btn.text() == "Stop"
        assert win._status_label.text() == "Running"

    def test_duration_buttons(self, controller):
        win = TimerWindow(controller)
        win._longer_btn.click()
        assert win._duration_label.text() == "05:30"
        win._shorter_btn.click()
        win._shorter_btn.click()
        assert win._duration_label.text() == "04:30"

    def test_nudge_buttons(self, controller):
        win = TimerWindow(controller)
        win._minus_second_btn.click()
        assert win._time_label.text() == "04:59"
        win._plus_second_btn.click()
        assert win._time_label.text() == "05:00"

    def test_reset_button(self, controller):
        win = TimerWindow(controller)
        controller.start()
        controller.change_current_time(-30)
        win._reset_btn.click()
        assert win._time_label.text() == "05:00"
        assert win._status_label.text() == "Stopped"

    def test_close_releases_controller(self, controller):
        win = TimerWindow(controller)
        win.show()
        controller.start()
        win.close()
        assert controller.state.is_running is False

    def test_progress_bar_tracks_round(self, controller, clock):
        win = TimerWindow(controller)
        assert win._progress.value() == 0
        controller.start()
        clock.set(DEFAULT_ROUND_TIME // 4)
        controller.engine._on_tick()
        assert controller.percent_complete == pytest.approx(0.25)
        assert win._progress.value() == 250
        controller.reset()
        assert win._progress.value() == 0
