"""
Configure window: a floating popup for editing a layer's visual attributes.

Controls apply to the layer as soon as they commit (menu selection, or
Enter / focus-out on a text box) and the map redraws straight away. Which
controls are shown depends on the layer:

    - colour-mapped layers   colormap, colour scale, range min/max, alpha, colour bar
    - solid-colour layers    alpha only
    - polygons               stroke colour, stroke width
    - lines                  stroke colour, stroke width, line width
    - points                 marker, marker size
"""
import logging
import math

from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.colorbar import Colorbar
from matplotlib.colors import to_hex, to_rgba
from matplotlib.figure import Figure

from PyQt5.QtCore import QLocale, Qt
from PyQt5.QtGui import QDoubleValidator, QFont
from PyQt5.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
    QWidget,
)

from ..config import COLORMAPS, COLORSCALES, MARKERS
from ..models import LayerKind, column_values, numeric_columns

logger = logging.getLogger(__name__)

COLOR_BY_PLACEHOLDER = "(current)"


def parse_float(text):
    """Finite float from user text, or None."""
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_color(text):
    """RGBA tuple from any colour string matplotlib understands, or None."""
    try:
        return to_rgba(str(text).strip())
    except ValueError:
        return None


def format_float(value):
    return f"{value:g}"


def format_color(rgba):
    return to_hex(rgba, keep_alpha=True)


def _section_label(text, size):
    label = QLabel(text)
    font = QFont(label.font())
    font.setPixelSize(size)
    font.setBold(True)
    label.setFont(font)
    return label


class ConfigureWindow(QWidget):
    """
    Popup bound to one PlotLayer.

    Parameters
    ----------
    layer : PlotLayer
        The layer to edit.
    dataset : GeoDataFrame, optional
        Source data of a vector layer; enables the "Color by" column menu.
    parent : QWidget, optional
    """

    def __init__(self, layer, dataset=None, parent=None):
        super().__init__(parent)
        self.setWindowFlag(Qt.Window, True)
        self.setAttribute(Qt.WA_DeleteOnClose, True)
        self.setWindowTitle("Plot Configurator")
        self.resize(450, 400)

        self.layer = layer
        self.dataset = dataset
        self.colorbar = None
        self.colorbar_canvas = None
        self.color_by_menu = None
        self.alpha_edit = None

        outer = QVBoxLayout(self)
        title = _section_label("Configure Plot", 18)
        title.setAlignment(Qt.AlignHCenter)
        outer.addWidget(title)

        if layer.has_colormap():
            row = QHBoxLayout()
            row.addLayout(self._build_colormap_controls(), 1)
            row.addWidget(self._build_colorbar())
            outer.addLayout(row)
        else:
            form = QFormLayout()
            self.alpha_edit = self._float_edit(
                lambda: layer.alpha, self._set_alpha)
            form.addRow("Alpha:", self.alpha_edit)
            outer.addLayout(form)

        if layer.kind is LayerKind.POLY:
            outer.addWidget(_section_label("Poly Settings", 14))
            outer.addLayout(self._build_stroke_controls())
        elif layer.kind is LayerKind.LINES:
            outer.addWidget(_section_label("Lines Settings", 14))
            outer.addLayout(self._build_line_controls())
        elif layer.kind is LayerKind.SCATTER:
            outer.addWidget(_section_label("Scatter Settings", 14))
            outer.addLayout(self._build_scatter_controls())

        outer.addStretch(1)

    # ------------------------------------------------------------------ builders

    def _float_edit(self, getter, setter):
        """Line edit that commits a float on editingFinished; unparseable or rejected input reverts."""
        edit = QLineEdit(format_float(getter()))
        validator = QDoubleValidator(edit)
        validator.setLocale(QLocale.c())
        edit.setValidator(validator)
        edit.setFixedWidth(120)

        def commit():
            value = parse_float(edit.text())
            if value is None:
                logger.warning(f"Ignoring invalid number {edit.text()!r} for {self.layer.name!r}")
            else:
                try:
                    setter(value)
                except ValueError as e:
                    logger.warning(f"Rejected {value:g} for {self.layer.name!r}: {e}")
                else:
                    self._refresh()
            edit.setText(format_float(getter()))

        edit.editingFinished.connect(commit)
        return edit

    def _color_edit(self, getter, setter):
        edit = QLineEdit(format_color(getter()))
        edit.setFixedWidth(120)

        def commit():
            rgba = parse_color(edit.text())
            if rgba is None:
                logger.warning(f"Ignoring invalid colour {edit.text()!r} for {self.layer.name!r}")
            else:
                setter(rgba)
                self._refresh()
            edit.setText(format_color(getter()))

        edit.editingFinished.connect(commit)
        return edit

    def _build_colormap_controls(self):
        layer = self.layer
        form = QFormLayout()

        self.colormap_menu = QComboBox()
        self.colormap_menu.addItems(COLORMAPS)
        current = layer.colormap
        if current not in COLORMAPS:
            self.colormap_menu.insertItem(0, current)
        self.colormap_menu.setCurrentText(current)
        self.colormap_menu.currentTextChanged.connect(self._on_colormap)
        form.addRow("Colormap:", self.colormap_menu)

        self.colorscale_menu = QComboBox()
        for label, name in COLORSCALES:
            self.colorscale_menu.addItem(label, name)
        self.colorscale_menu.setCurrentIndex(self.colorscale_menu.findData(layer.colorscale))
        self.colorscale_menu.currentIndexChanged.connect(self._on_colorscale)
        form.addRow("Colorscale:", self.colorscale_menu)

        self.range_min_edit = self._float_edit(
            lambda: layer.colorrange[0], self._set_range_min)
        form.addRow("Range min:", self.range_min_edit)

        self.range_max_edit = self._float_edit(
            lambda: layer.colorrange[1], self._set_range_max)
        form.addRow("Range max:", self.range_max_edit)

        self.alpha_edit = self._float_edit(lambda: layer.alpha, self._set_alpha)
        form.addRow("Alpha:", self.alpha_edit)

        if self.dataset is not None and layer.kind in (LayerKind.SCATTER, LayerKind.LINES, LayerKind.POLY):
            columns = numeric_columns(self.dataset)
            if columns:
                self.color_by_menu = QComboBox()
                self.color_by_menu.addItem(COLOR_BY_PLACEHOLDER)
                self.color_by_menu.addItems([str(c) for c in columns])
                self.color_by_menu.currentIndexChanged.connect(self._on_color_by)
                form.addRow("Color by:", self.color_by_menu)

        return form

    def _build_colorbar(self):
        fig = Figure(figsize=(1.0, 3.0))
        cax = fig.add_axes([0.25, 0.05, 0.3, 0.9])
        self.colorbar = Colorbar(cax, self.layer.artist)
        self.colorbar_canvas = FigureCanvas(fig)
        self.colorbar_canvas.setFixedWidth(90)
        return self.colorbar_canvas

    def _build_stroke_controls(self):
        layer = self.layer
        form = QFormLayout()
        self.strokecolor_edit = self._color_edit(
            lambda: layer.strokecolor, lambda c: setattr(layer, "strokecolor", c))
        form.addRow("Strokecolor:", self.strokecolor_edit)
        self.strokewidth_edit = self._float_edit(
            lambda: layer.strokewidth, lambda v: setattr(layer, "strokewidth", v))
        form.addRow("Strokewidth:", self.strokewidth_edit)
        return form

    def _build_line_controls(self):
        layer = self.layer
        form = self._build_stroke_controls()
        self.linewidth_edit = self._float_edit(
            lambda: layer.linewidth, lambda v: setattr(layer, "linewidth", v))
        form.addRow("Linewidth:", self.linewidth_edit)
        return form

    def _build_scatter_controls(self):
        layer = self.layer
        form = QFormLayout()
        self.marker_menu = QComboBox()
        self.marker_menu.addItems([label for label, _ in MARKERS])
        self.marker_menu.setCurrentText(layer.marker)
        self.marker_menu.currentTextChanged.connect(self._on_marker)
        form.addRow("Marker:", self.marker_menu)
        self.markersize_edit = self._float_edit(
            lambda: layer.markersize, lambda v: setattr(layer, "markersize", v))
        form.addRow("Markersize:", self.markersize_edit)
        return form

    # ------------------------------------------------------------------ callbacks

    def _refresh(self):
        self.layer.redraw()
        if self.colorbar_canvas is not None:
            self.colorbar_canvas.draw_idle()

    def _sync_range_edits(self):
        vmin, vmax = self.layer.colorrange
        self.range_min_edit.setText(format_float(vmin))
        self.range_max_edit.setText(format_float(vmax))

    def _set_alpha(self, value):
        self.layer.alpha = value

    def _set_range_min(self, value):
        self.layer.colorrange = (value, self.layer.colorrange[1])
        self._sync_range_edits()

    def _set_range_max(self, value):
        self.layer.colorrange = (self.layer.colorrange[0], value)
        self._sync_range_edits()

    def _on_colormap(self, name):
        logger.debug(f"Colormap of {self.layer.name!r} -> {name}")
        self.layer.colormap = name
        self._refresh()

    def _on_colorscale(self, index):
        name = self.colorscale_menu.itemData(index)
        try:
            self.layer.colorscale = name
        except ValueError as e:
            logger.warning(f"Colorscale {name} rejected: {e}")
            self.colorscale_menu.blockSignals(True)
            self.colorscale_menu.setCurrentIndex(self.colorscale_menu.findData(self.layer.colorscale))
            self.colorscale_menu.blockSignals(False)
            return
        self._sync_range_edits()
        self._refresh()

    def _on_color_by(self, index):
        if index <= 0:
            return
        column = self.color_by_menu.itemText(index)
        logger.info(f"Colouring {self.layer.name!r} by column {column}")
        self.layer.set_color_values(column_values(self.dataset, column))
        self._sync_range_edits()
        self._refresh()

    def _on_marker(self, label):
        self.layer.marker = label
        self._refresh()

    def closeEvent(self, event):
        # detach the popup colour bar so the layer stops updating a dead figure
        artist = self.layer.artist
        if self.colorbar is not None and getattr(artist, "colorbar", None) is self.colorbar:
            cid = getattr(artist, "colorbar_cid", None)
            if cid is not None:
                artist.callbacks.disconnect(cid)
            artist.colorbar = None
        super().closeEvent(event)


def configure(layer, dataset=None, parent=None) -> ConfigureWindow:
    """
    Open a popup window to configure a layer's attributes interactively.

    Changes apply immediately as controls are adjusted. Returns the window,
    which the caller should keep a reference to while it is open.
    """
    logger.info(f"Opening configure window for {layer!r}")
    win = ConfigureWindow(layer, dataset=dataset, parent=parent)
    win.show()
    win.raise_()
    return win
