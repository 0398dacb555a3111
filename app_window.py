"""App window: hosts the pendulum view and a status bar."""

import logging

from PyQt6.QtWidgets import QMainWindow, QStatusBar

from pendulum.view import PendulumView

logger = logging.getLogger(__name__)


class AppWindow(QMainWindow):
    """Top-level window around a single PendulumView."""

    def __init__(self, runner):
        super().__init__()
        self.setWindowTitle("Chaos Pendulums")
        self.resize(1100, 800)

        self.pendulum_view = PendulumView(runner)
        self.setCentralWidget(self.pendulum_view)

        # --- Status bar ---
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.addWidget(self.pendulum_view.count_label)
        self._status_bar.addWidget(self.pendulum_view.time_label)
        self._status_bar.addWidget(self.pendulum_view.damping_label)

    def showEvent(self, event):
        super().showEvent(event)
        self.pendulum_view.start()
        logger.info("Simulation started")

    def closeEvent(self, event):
        self.pendulum_view.stop()
        super().closeEvent(event)
