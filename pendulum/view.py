"""Pendulum view: wires the runner, canvas, controls and keyboard.

A QTimer drives frames on the GUI thread. Each frame measures the real
elapsed time, hands it to the runner (fixed physics steps + trail
sampling), then repaints. Input commands run between frames, so the
runner only ever has one writer.
"""

import logging
import time

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QWidget, QHBoxLayout, QSplitter, QLabel

from pendulum.canvas import PendulumCanvas
from pendulum.controls import PendulumControls

logger = logging.getLogger(__name__)


class PendulumView(QWidget):
    """Canvas + controls around one SimulationRunner."""

    FPS = 60

    def __init__(self, runner, parent=None):
        super().__init__(parent)
        self.runner = runner

        self.canvas = PendulumCanvas(runner)
        self.controls = PendulumControls()

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.canvas)
        splitter.addWidget(self.controls)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(splitter)

        # Status bar labels (AppWindow places these in a real status bar)
        self.count_label = QLabel()
        self.time_label = QLabel()
        self.damping_label = QLabel()

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        # Key -> runner command
        self._key_actions = {
            Qt.Key.Key_R: self.runner.reset,
            Qt.Key.Key_S: self.runner.spawn_one,
            Qt.Key.Key_W: self.runner.spawn_many,
            Qt.Key.Key_A: self.runner.toggle_trails,
            Qt.Key.Key_P: self.runner.toggle_pendulum_draw,
            Qt.Key.Key_D: self.runner.toggle_damping,
        }

        # Wire signals
        self.controls.spawn_btn.clicked.connect(
            lambda: self._run_command(self.runner.spawn_one))
        self.controls.spawn_many_btn.clicked.connect(
            lambda: self._run_command(self.runner.spawn_many))
        self.controls.reset_btn.clicked.connect(
            lambda: self._run_command(self.runner.reset))
        self.controls.trails_checkbox.toggled.connect(
            lambda _checked: self._run_command(self.runner.toggle_trails))
        self.controls.pendulums_checkbox.toggled.connect(
            lambda _checked: self._run_command(self.runner.toggle_pendulum_draw))
        self.controls.damping_checkbox.toggled.connect(
            lambda _checked: self._run_command(self.runner.toggle_damping))

        # Timer
        self._last_frame = None
        self.timer = QTimer()
        self.timer.setInterval(int(1000 / self.FPS))
        self.timer.timeout.connect(self._on_timer)

        self.controls.sync_from_config(self.runner.config)
        self._refresh_status()

    # -- Public interface --

    def start(self):
        self._last_frame = time.perf_counter()
        self.timer.start()
        self.setFocus()

    def stop(self):
        self.timer.stop()
        self._last_frame = None

    # -- Frame loop --

    def _on_timer(self):
        now = time.perf_counter()
        elapsed = 0.0 if self._last_frame is None else now - self._last_frame
        self._last_frame = now

        self.runner.advance(elapsed)
        self.canvas.update()
        self._refresh_status()

    # -- Input --

    def _run_command(self, command):
        logger.debug("Command: %s", command.__name__)
        command()
        self.controls.sync_from_config(self.runner.config)
        self._refresh_status()
        self.canvas.update()
        self.setFocus()

    def keyPressEvent(self, event):
        if event.isAutoRepeat():
            return
        action = self._key_actions.get(event.key())
        if action is None:
            super().keyPressEvent(event)
            return
        self._run_command(action)

    def _refresh_status(self):
        n = len(self.runner.registry)
        self.controls.set_count(n)
        self.count_label.setText(f"  Pendulums: {n}  ")
        self.time_label.setText(f"  t = {self.runner.sim_time:.2f} s  ")
        state = "on" if self.runner.config.damping_enabled else "off"
        self.damping_label.setText(f"  Damping: {state}  ")
