"""Shared pytest fixtures for RoundTimer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from roundtimer.timer.engine import TimerEngine
from roundtimer.timer.state import MINUTE

from helpers import FakeAudio, FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def clock():
    """Manually advanced wall clock starting at t=0 ms."""
    return FakeClock()


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def engine(qapp, clock, audio):
    """Fresh TimerEngine with a one-minute round, fake clock and audio."""
    eng = TimerEngine(round_time=MINUTE, audio=audio, clock=clock)
    yield eng
    eng.destroy()
