"""Pendulum control panel: spawn/reset buttons and draw/damping toggles.

Every widget mirrors a keyboard shortcut handled by PendulumView, so the
panel and the keys drive the same runner commands.
"""

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QPushButton, QCheckBox, QLabel,
)


class PendulumControls(QWidget):
    """Buttons for spawning and resetting, checkboxes for the toggles."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._init_ui()

    def _init_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(8, 8, 8, 8)

        # --- Pendulums ---
        spawn_group = QGroupBox("Pendulums")
        spawn_layout = QHBoxLayout()
        spawn_group.setLayout(spawn_layout)

        self.spawn_btn = QPushButton("Spawn (S)")
        self.spawn_many_btn = QPushButton("Spawn 10 (W)")
        self.reset_btn = QPushButton("Reset (R)")
        spawn_layout.addWidget(self.spawn_btn)
        spawn_layout.addWidget(self.spawn_many_btn)
        spawn_layout.addWidget(self.reset_btn)

        main_layout.addWidget(spawn_group)

        # --- Display ---
        display_group = QGroupBox("Display")
        display_layout = QVBoxLayout()
        display_group.setLayout(display_layout)

        self.trails_checkbox = QCheckBox("Draw trails (A)")
        self.pendulums_checkbox = QCheckBox("Draw pendulums (P)")
        display_layout.addWidget(self.trails_checkbox)
        display_layout.addWidget(self.pendulums_checkbox)

        main_layout.addWidget(display_group)

        # --- Physics ---
        physics_group = QGroupBox("Physics")
        physics_layout = QVBoxLayout()
        physics_group.setLayout(physics_layout)

        self.damping_checkbox = QCheckBox("Damping (D)")
        physics_layout.addWidget(self.damping_checkbox)

        main_layout.addWidget(physics_group)

        self.count_label = QLabel("Pendulums: 0")
        self.count_label.setStyleSheet("color: #aaa;")
        main_layout.addWidget(self.count_label)

        main_layout.addStretch()

    def sync_from_config(self, config):
        """Update the checkboxes without re-emitting toggle signals."""
        for checkbox, value in [
            (self.trails_checkbox, config.draw_trails),
            (self.pendulums_checkbox, config.draw_pendulums),
            (self.damping_checkbox, config.damping_enabled),
        ]:
            checkbox.blockSignals(True)
            checkbox.setChecked(value)
            checkbox.blockSignals(False)

    def set_count(self, n):
        self.count_label.setText(f"Pendulums: {n}")
