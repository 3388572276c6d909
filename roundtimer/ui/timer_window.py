"""Main timer window.

Layout (top → bottom):
    - Wall clock
    - Status ("Running" / "Paused" / "Stopped")
    - Countdown with -1 s / +1 s nudges
    - Progress through the round
    - Duration row with -30 s / +30 s
    - Start/Stop and Reset
"""

from __future__ import annotations

from datetime import datetime

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QProgressBar,
)

from ..controller import TimerController, format_clock, format_time
from ..timer.state import TimerState

ENDING_SOON_STYLE = "font-size: 64px; color: #F38BA8;"
NORMAL_STYLE = "font-size: 64px;"
PROGRESS_STEPS = 1000


class TimerWindow(QWidget):
    """Renders controller snapshots; every button maps to one action."""

    def __init__(
        self, controller: TimerController, parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self.setWindowTitle("RoundTimer")
        self._build_ui()
        self._connect_signals()

        self._unsubscribe = controller.subscribe(self._on_state)

        self._clock_timer = QTimer(self)
        self._clock_timer.setInterval(1000)
        self._clock_timer.timeout.connect(self._refresh_clock)
        self._clock_timer.start()

        self._refresh_clock()
        self._on_state(controller.state)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._clock_label = QLabel(self)
        self._clock_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._clock_label)

        self._status_label = QLabel(self)
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._status_label)

        # ── countdown ────────────────────────────────────────────────
        time_row = QHBoxLayout()
        time_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._minus_second_btn = QPushButton("−", self)
        self._time_label = QLabel(self)
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time_label.setStyleSheet(NORMAL_STYLE)
        self._plus_second_btn = QPushButton("+", self)
        time_row.addWidget(self._minus_second_btn)
        time_row.addWidget(self._time_label)
        time_row.addWidget(self._plus_second_btn)
        layout.addLayout(time_row)

        self._progress = QProgressBar(self)
        self._progress.setRange(0, PROGRESS_STEPS)
        self._progress.setTextVisible(False)
        layout.addWidget(self._progress)

        # ── duration ─────────────────────────────────────────────────
        duration_row = QHBoxLayout()
        duration_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        duration_row.addWidget(QLabel("Duration:", self))
        self._shorter_btn = QPushButton("−", self)
        self._duration_label = QLabel(self)
        self._longer_btn = QPushButton("+", self)
        duration_row.addWidget(self._shorter_btn)
        duration_row.addWidget(self._duration_label)
        duration_row.addWidget(self._longer_btn)
        layout.addLayout(duration_row)

        # ── main controls ────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._toggle_btn = QPushButton("Start", self)
        self._reset_btn = QPushButton("Reset", self)
        btn_row.addWidget(self._toggle_btn)
        btn_row.addWidget(self._reset_btn)
        layout.addLayout(btn_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        c = self._controller
        self._toggle_btn.clicked.connect(c.toggle)
        self._reset_btn.clicked.connect(c.reset)
        self._minus_second_btn.clicked.connect(lambda: c.change_current_time(-1))
        self._plus_second_btn.clicked.connect(lambda: c.change_current_time(1))
        self._shorter_btn.clicked.connect(lambda: c.change_round_time(-30))
        self._longer_btn.clicked.connect(lambda: c.change_round_time(30))

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_state(self, state: TimerState) -> None:
        self._status_label.setText(self._controller.status_text)
        self._time_label.setText(format_time(state.time_left))
        self._time_label.setStyleSheet(
            ENDING_SOON_STYLE if self._controller.is_ending_soon else NORMAL_STYLE
        )
        self._duration_label.setText(format_time(state.round_time))
        self._progress.setValue(round(self._controller.percent_complete * PROGRESS_STEPS))
        self._toggle_btn.setText("Stop" if state.is_running else "Start")

    def _refresh_clock(self) -> None:
        self._clock_label.setText(format_clock(datetime.now()))

    def closeEvent(self, event: QCloseEvent) -> None:
        self._clock_timer.stop()
        self._unsubscribe()
        self._controller.close()
        super().closeEvent(event)
