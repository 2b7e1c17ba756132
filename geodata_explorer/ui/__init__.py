"""
UI module for GeoData Explorer.

This package contains the Qt-based user-interface components:

- ScrollableList:
    Custom-painted layer list with hover, hide/show toggling on row clicks,
    a configure chevron on each row and clamped wheel scrolling.

- ConfigureWindow / configure:
    Floating popup binding a layer's colormap, colour scale, colour range,
    alpha, strokes, line width and markers to live controls.

- MapCanvas:
    The embedded matplotlib map axes plus navigation toolbar.

The explorer's main window lives in `geodata_explorer.main` and assembles
these pieces.
"""

from .configure_window import ConfigureWindow, configure
from .scrollable_list import ScrollableList, clamp_offset, pick_entry
from .util_windows import MapCanvas, busy_cursor

__all__ = [
    "ConfigureWindow",
    "configure",
    "ScrollableList",
    "clamp_offset",
    "pick_entry",
    "MapCanvas",
    "busy_cursor",
]
