"""Pendulum canvas: QPainter rendering of every live pendulum.

Implements the runner's Renderer protocol (draw_segment / draw_path) on
top of a QPainter that is only valid inside paintEvent.
"""

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QPainter, QPen, QColor
from PyQt6.QtWidgets import QWidget


def to_qcolor(color, alpha=255):
    """Convert an (r, g, b) float triple in [0, 1] to a QColor."""
    r, g, b = (max(0, min(255, int(round(c * 255)))) for c in color)
    return QColor(r, g, b, alpha)


class PendulumCanvas(QWidget):
    """Custom widget that draws pendulums from a SimulationRunner."""

    # Pixels per physics length unit; rods of length 10 draw at 200 px
    PIXELS_PER_UNIT = 20.0
    SEGMENT_WIDTH = 2.0
    TRAIL_WIDTH = 1.5

    def __init__(self, runner=None, parent=None):
        super().__init__(parent)
        self.runner = runner
        self._painter = None
        self.setMinimumSize(400, 400)

    def _scale(self):
        """Fit the default rod span into the smaller widget dimension."""
        default_reach = 2 * 10.0 * self.PIXELS_PER_UNIT
        fit = min(self.width(), self.height()) * 0.48 / default_reach
        return self.PIXELS_PER_UNIT * min(1.0, fit)

    def _to_pixel(self, x, y):
        """Convert physics coords (y up, pivot at origin) to pixel coords."""
        scale = self._scale()
        px = self.width() / 2 + x * scale
        py = self.height() / 2 - y * scale
        return px, py

    # -- Renderer protocol --

    def draw_segment(self, start_pos, end_pos, color):
        if self._painter is None:
            return
        pen = QPen(to_qcolor(color))
        pen.setWidthF(self.SEGMENT_WIDTH)
        self._painter.setPen(pen)
        self._painter.drawLine(
            QPointF(*self._to_pixel(*start_pos)),
            QPointF(*self._to_pixel(*end_pos)),
        )

    def draw_path(self, positions, color):
        """Draw the trail, fading from transparent (oldest) to opaque."""
        if self._painter is None or len(positions) < 2:
            return
        n = len(positions)
        points = [QPointF(*self._to_pixel(x, y)) for x, y in positions]
        for i in range(1, n):
            alpha = int(255 * i / n)
            pen = QPen(to_qcolor(color, alpha))
            pen.setWidthF(self.TRAIL_WIDTH)
            self._painter.setPen(pen)
            self._painter.drawLine(points[i - 1], points[i])

    # -- painting --

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(20, 20, 30))

        # Pivot marker
        cx, cy = self._to_pixel(0.0, 0.0)
        painter.setPen(QPen(QColor(180, 180, 180)))
        r = 3
        painter.drawEllipse(QPointF(cx, cy), r, r)

        if self.runner is not None:
            self._painter = painter
            try:
                self.runner.render(self)
            finally:
                self._painter = None

        painter.end()
