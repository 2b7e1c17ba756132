"""
Plot layers: one matplotlib artist per dataset, with editable visual attributes.

`PlotLayer` is what the layer list, the click handlers and the configure
window operate on. It hides which matplotlib artist class sits underneath
(PathCollection, LineCollection, PatchCollection, AxesImage or QuadMesh) and
exposes the attributes the UI binds to as plain properties.
"""

from enum import Enum
import logging

import numpy as np
from matplotlib import patheffects
from matplotlib.colors import AsinhNorm, LogNorm, Normalize, PowerNorm, to_rgba
from matplotlib.markers import MarkerStyle

from ..config import COLORSCALES, MARKERS

logger = logging.getLogger(__name__)


class LayerKind(Enum):
    SCATTER = "scatter"
    LINES = "lines"
    POLY = "poly"
    HEATMAP = "heatmap"
    SURFACE = "surface"


COLORSCALE_NAMES = [name for _, name in COLORSCALES]
MARKER_CODES = dict(MARKERS)


def make_norm(colorscale, vmin, vmax):
    if colorscale == "identity":
        return Normalize(vmin=vmin, vmax=vmax)
    if colorscale == "log10":
        return LogNorm(vmin=vmin, vmax=vmax)
    if colorscale == "sqrt":
        return PowerNorm(gamma=0.5, vmin=vmin, vmax=vmax)
    if colorscale == "asinh":
        return AsinhNorm(vmin=vmin, vmax=vmax)
    raise ValueError(f"Unknown colorscale {colorscale!r}, expected one of {COLORSCALE_NAMES}")


def _norm_name(norm):
    if isinstance(norm, LogNorm):
        return "log10"
    if isinstance(norm, PowerNorm):
        return "sqrt"
    if isinstance(norm, AsinhNorm):
        return "asinh"
    return "identity"


def marker_path(label):
    """Marker path for a MARKERS label, scaled the way Axes.scatter scales it."""
    if label not in MARKER_CODES:
        raise ValueError(f"Unknown marker {label!r}, expected one of {list(MARKER_CODES)}")
    style = MarkerStyle(MARKER_CODES[label])
    return style.get_path().transformed(style.get_transform())


class PlotLayer:
    """
    A single plotted dataset and its editable visual attributes.

    Parameters
    ----------
    artist : matplotlib.cm.ScalarMappable
        The artist returned by the plotting call, already added to an Axes.
    kind : LayerKind
        Which plotting path produced the artist; decides the valid attributes.
    name : str, optional
        Display name (usually the dataset name).
    marker : str, optional
        MARKERS label the scatter was drawn with.
    """

    def __init__(self, artist, kind: LayerKind, name: str = "", marker: str = "circle"):
        self.artist = artist
        self.kind = kind
        self.name = name
        self._marker = marker
        self._colorscale = _norm_name(artist.norm)
        self._strokecolor = to_rgba("black")
        self._strokewidth = 0.0
        # dataset row of each drawn element (vector layers only)
        self.feature_rows = None

    def __repr__(self):
        return f"PlotLayer({self.kind.value}, {self.name!r})"

    def _require(self, attr, *kinds):
        if self.kind not in kinds:
            raise TypeError(f"{self.kind.value} layers have no {attr}")

    def _require_colormap(self, attr):
        if not self.has_colormap():
            raise TypeError(f"{attr} needs a colour-mapped layer; {self.name!r} uses a solid colour")

    def redraw(self):
        fig = self.artist.figure
        if fig is not None and fig.canvas is not None:
            fig.canvas.draw_idle()

    # ------------------------------------------------------------------ all kinds

    @property
    def visible(self) -> bool:
        return self.artist.get_visible()

    @visible.setter
    def visible(self, value):
        self.artist.set_visible(bool(value))

    @property
    def alpha(self) -> float:
        alpha = self.artist.get_alpha()
        return 1.0 if alpha is None else float(alpha)

    @alpha.setter
    def alpha(self, value):
        self.artist.set_alpha(float(np.clip(float(value), 0.0, 1.0)))

    def has_colormap(self) -> bool:
        """True if the artist colours its elements from numeric data through a colormap."""
        try:
            data = self.artist.get_array()
            if data is None:
                return False
            data = np.asanyarray(data)
            return data.size > 0 and np.issubdtype(data.dtype, np.number)
        except (AttributeError, TypeError, ValueError):
            return False

    # ------------------------------------------------------------------ colour mapping

    @property
    def colormap(self) -> str:
        self._require_colormap("colormap")
        return self.artist.get_cmap().name

    @colormap.setter
    def colormap(self, name):
        self._require_colormap("colormap")
        self.artist.set_cmap(name)

    @property
    def colorrange(self) -> tuple[float, float]:
        self._require_colormap("colorrange")
        vmin, vmax = self.artist.get_clim()
        return float(vmin), float(vmax)

    @colorrange.setter
    def colorrange(self, value):
        self._require_colormap("colorrange")
        vmin, vmax = (float(v) for v in value)
        if vmin >= vmax:
            raise ValueError(f"Colour range minimum {vmin:g} must be below the maximum {vmax:g}")
        if self._colorscale == "log10" and vmin <= 0:
            raise ValueError(f"log10 colour scale needs a positive range minimum, got {vmin:g}")
        self.artist.set_clim(vmin, vmax)

    @property
    def colorscale(self) -> str:
        self._require_colormap("colorscale")
        return self._colorscale

    @colorscale.setter
    def colorscale(self, name):
        self._require_colormap("colorscale")
        vmin, vmax = self.colorrange
        if name == "log10" and vmin <= 0:
            data = np.ma.masked_invalid(np.ma.asanyarray(self.artist.get_array(), dtype=float))
            values = data.compressed()
            positive = values[values > 0]
            if positive.size == 0:
                raise ValueError(f"{self.name!r} has no positive values, log10 scale is not possible")
            vmin = float(positive.min())
            vmax = max(vmax, vmin)
        self.artist.set_norm(make_norm(name, vmin, vmax))
        self._colorscale = name

    def set_color_values(self, values):
        """
        Re-colour a vector layer from numeric values and autoscale the range.

        `values` holds one value per dataset row; multi-part features repeat
        their row's value on every drawn part.
        """
        self._require("color values", LayerKind.SCATTER, LayerKind.LINES, LayerKind.POLY)
        self._require_colormap("color values")
        values = np.asarray(values, dtype=float)
        if self.feature_rows is not None:
            values = values[self.feature_rows]
        values = np.ma.masked_invalid(values)
        self.artist.set_array(values)
        self.artist.norm.vmin = None
        self.artist.norm.vmax = None
        self.artist.autoscale_None()

    # ------------------------------------------------------------------ strokes

    @property
    def strokecolor(self):
        self._require("strokecolor", LayerKind.POLY, LayerKind.LINES)
        if self.kind is LayerKind.LINES:
            return self._strokecolor
        edges = self.artist.get_edgecolor()
        if len(edges) == 0:
            return self._strokecolor
        return tuple(float(c) for c in edges[0])

    @strokecolor.setter
    def strokecolor(self, value):
        self._require("strokecolor", LayerKind.POLY, LayerKind.LINES)
        rgba = to_rgba(value)
        self._strokecolor = rgba
        if self.kind is LayerKind.POLY:
            self.artist.set_edgecolor(rgba)
        else:
            self._apply_line_stroke()

    @property
    def strokewidth(self) -> float:
        self._require("strokewidth", LayerKind.POLY, LayerKind.LINES)
        if self.kind is LayerKind.LINES:
            return self._strokewidth
        widths = self.artist.get_linewidth()
        return float(widths[0]) if len(widths) else 0.0

    @strokewidth.setter
    def strokewidth(self, value):
        self._require("strokewidth", LayerKind.POLY, LayerKind.LINES)
        value = max(float(value), 0.0)
        self._strokewidth = value
        if self.kind is LayerKind.POLY:
            self.artist.set_linewidth(value)
        else:
            self._apply_line_stroke()

    @property
    def linewidth(self) -> float:
        self._require("linewidth", LayerKind.LINES)
        widths = self.artist.get_linewidth()
        return float(widths[0]) if len(widths) else 0.0

    @linewidth.setter
    def linewidth(self, value):
        self._require("linewidth", LayerKind.LINES)
        self.artist.set_linewidth(max(float(value), 0.0))
        self._apply_line_stroke()

    def _apply_line_stroke(self):
        # outline = a wider line in the stroke colour drawn under the real one
        if self._strokewidth <= 0:
            self.artist.set_path_effects([])
            return
        outline = self.linewidth + 2 * self._strokewidth
        self.artist.set_path_effects([
            patheffects.Stroke(linewidth=outline, foreground=self._strokecolor),
            patheffects.Normal(),
        ])

    # ------------------------------------------------------------------ markers

    @property
    def marker(self) -> str:
        self._require("marker", LayerKind.SCATTER)
        return self._marker

    @marker.setter
    def marker(self, label):
        self._require("marker", LayerKind.SCATTER)
        self.artist.set_paths([marker_path(label)])
        self._marker = label

    @property
    def markersize(self) -> float:
        """Marker diameter in points (scatter sizes are areas in points**2)."""
        self._require("markersize", LayerKind.SCATTER)
        sizes = self.artist.get_sizes()
        return float(np.sqrt(sizes[0])) if len(sizes) else 0.0

    @markersize.setter
    def markersize(self, value):
        self._require("markersize", LayerKind.SCATTER)
        value = max(float(value), 0.0)
        self.artist.set_sizes([value ** 2])
