"""
Shared widgets and helpers: the map canvas and a busy-cursor context manager.
"""

from contextlib import contextmanager

from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas, NavigationToolbar2QT as NavigationTool
from matplotlib.figure import Figure

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QApplication, QVBoxLayout, QWidget


@contextmanager
def busy_cursor(msg=None, window=None):
    """Temporarily set the cursor to busy; restores automatically."""
    QApplication.setOverrideCursor(Qt.WaitCursor)
    if window and hasattr(window, "statusBar") and msg:
        window.statusBar().showMessage(msg)
    try:
        yield
    finally:
        QApplication.restoreOverrideCursor()
        if window and hasattr(window, "statusBar"):
            window.statusBar().clearMessage()


class MapCanvas(QWidget):
    """Matplotlib map axes with a navigation toolbar, kept at equal data aspect."""
    def __init__(self, parent=None, figsize=(9, 8)):
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.fig = Figure(figsize=figsize)
        self.ax = self.fig.add_subplot(111)
        self.ax.set_aspect("equal", adjustable="datalim")
        self.canvas = FigureCanvas(self.fig)
        layout.addWidget(self.canvas)

        self.toolbar = NavigationTool(self.canvas, self)
        layout.addWidget(self.toolbar)

    def set_extent(self, extent):
        self.ax.set_xlim(extent.west, extent.east)
        self.ax.set_ylim(extent.south, extent.north)

    def draw(self):
        self.canvas.draw_idle()
