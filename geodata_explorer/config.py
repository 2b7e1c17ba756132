"""
Global configuration dictionary and default parameters used across GeoData Explorer.

Stores default layer styling, raster size limits, layer-list geometry and
window sizing shared by the plotting, model and interface modules.
"""
import json
from pathlib import Path

con_dict = {
    # rasters larger than this are refused (no pyramid rendering)
    "max_raster_cells": 15000 * 15000,

    # vector styling
    "default_colormap": "viridis",
    "default_vector_color": "tab:blue",
    "default_markersize": 8.0,
    "default_linewidth": 1.5,
    "default_strokecolor": "black",
    "default_strokewidth": 0.5,

    # layer list
    "list_item_height": 36,
    "list_width": 250,
    "list_max_autoheight": 300,
    "list_scroll_speed": 20.0,
    "chevron_fraction": 0.9,

    # explorer window
    "window_width": 1200,
    "window_height": 800,
}


# Curated colormap list
COLORMAPS = [
    # Sequential
    "viridis", "plasma", "inferno", "gray",
    # Diverging
    "RdBu", "coolwarm", "BrBG",
    # Geospatial
    "terrain", "gist_earth", "turbo",
]

COLORSCALES = [
    ("identity", "identity"),
    ("log10", "log10"),
    ("sqrt", "sqrt"),
    ("asinh", "asinh"),
]

# label -> matplotlib marker
MARKERS = [
    ("circle", "o"),
    ("rect", "s"),
    ("diamond", "D"),
    ("cross", "P"),
    ("utriangle", "^"),
    ("star5", "*"),
]

RASTER_EXTENSIONS = (".tiff", ".geotiff", ".tif", ".nc", ".nc4", ".h5")
VECTOR_EXTENSIONS = (".shp", ".gpkg", ".geojson", ".parquet", ".pq",
                     ".arrow", ".feather", ".fgb", ".shp.zip")


def get_value(key):
    return con_dict[key]


def set_value(key, value):
    if key not in con_dict:
        raise KeyError(key)
    # naive cast
    ty = type(con_dict[key])
    con_dict[key] = ty(value)


def get_all():
    return con_dict


def load_config(path):
    """Merge a JSON settings file into con_dict. Unknown keys raise KeyError."""
    values = json.loads(Path(path).read_text(encoding="utf-8"))
    for key, value in values.items():
        set_value(key, value)
    return con_dict


def save_config(path):
    Path(path).write_text(json.dumps(con_dict, indent=2), encoding="utf-8")
