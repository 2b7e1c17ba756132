"""
Turning loaded datasets into plot layers on a matplotlib Axes.

Vector datasets are dispatched on their geometry types (points, lines or
polygons) and drawn as a single collection each. Rasters are drawn as an
image on a regular grid, or as a quad mesh when the grid is rotated.
"""
import logging
from numbers import Real

import numpy as np
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.colors import is_color_like, to_rgba
from matplotlib.patches import PathPatch
from matplotlib.path import Path
from shapely.geometry.polygon import orient

from ..config import MARKERS, con_dict
from ..models import (
    Extent,
    LayerKind,
    PlotLayer,
    RasterDataset,
    column_values,
    numeric_columns,
)

logger = logging.getLogger(__name__)

POINT_TYPES = {"Point", "MultiPoint"}
LINE_TYPES = {"LineString", "LinearRing", "MultiLineString"}
POLYGON_TYPES = {"Polygon", "MultiPolygon"}


def geometry_kind(geom_types) -> LayerKind:
    """
    Decide how a set of geometry types is drawn.

    All types must come from one family (points, lines or polygons); single
    and multi-part variants of the same family may be mixed.
    """
    unique = set(geom_types)
    if not unique:
        raise ValueError("Dataset has no geometries to plot.")
    if unique <= POINT_TYPES:
        return LayerKind.SCATTER
    if unique <= LINE_TYPES:
        return LayerKind.LINES
    if unique <= POLYGON_TYPES:
        return LayerKind.POLY
    if len(unique) == 1:
        raise ValueError(f"Unsupported geometry type {unique.pop()}, use a point, line, or polygon dataset.")
    raise ValueError(
        "Multiple incompatible geometry types found in dataset, use a single type dataset.\n"
        f"Found types: {sorted(unique)}"
    )


def resolve_color(frame, color=None):
    """
    Work out how a vector dataset should be coloured.

    Returns
    -------
    tuple
        ("values", ndarray) for colour-mapped data, one value per row, or
        ("solid", rgba) for a single colour.
    """
    n = len(frame)
    if color is None:
        cols = numeric_columns(frame)
        if not cols:
            return "solid", to_rgba(con_dict["default_vector_color"])
        color = cols[0]

    if isinstance(color, str):
        if color in frame.columns:
            return "values", column_values(frame, color)
        if is_color_like(color):
            return "solid", to_rgba(color)
        raise ValueError(f"Column {color} not found in dataset, use a colour or a column name.")

    if isinstance(color, Real) and not isinstance(color, bool):
        return "values", np.full(n, float(color))

    if is_color_like(color):
        return "solid", to_rgba(color)

    raise TypeError(f"Cannot colour a dataset by {type(color).__name__}; use a colour, column name or number.")


def _polygon_path(poly):
    poly = orient(poly, sign=1.0)
    rings = [poly.exterior, *poly.interiors]
    return Path.make_compound_path(*[Path(np.asarray(ring.coords)[:, :2], closed=True) for ring in rings])


def plot_vector_dataset(ax, frame, color=None, **kwargs) -> PlotLayer:
    """
    Plot a GeoDataFrame as one points, lines or polygons layer.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
    frame : geopandas.GeoDataFrame
    color : None, str, number or colour tuple
        See `resolve_color`.
    **kwargs
        Passed through to the matplotlib call (`scatter` or the collection).

    Raises
    ------
    ValueError
        For empty datasets, mixed or unsupported geometry types, or an
        unusable colour column.
    """
    name = kwargs.pop("name", "")
    mode, colors = resolve_color(frame, color)

    geometry = frame.geometry.reset_index(drop=True)
    keep = ~(geometry.isna() | geometry.is_empty).to_numpy()
    if not keep.all():
        logger.debug(f"Dropping {int((~keep).sum())} missing or empty geometries")
    kept_rows = np.flatnonzero(keep)
    geometry = geometry[keep].reset_index(drop=True)

    kind = geometry_kind(geometry.geom_type.unique())

    # one drawn element per geometry part; remember which row each came from
    parts = geometry.explode(index_parts=False)
    feature_rows = kept_rows[parts.index.to_numpy()]
    part_values = colors[feature_rows] if mode == "values" else None

    cmap = kwargs.pop("cmap", con_dict["default_colormap"])

    if kind is LayerKind.SCATTER:
        marker_label = kwargs.pop("marker", "circle")
        marker = dict(MARKERS).get(marker_label, marker_label)
        size = kwargs.pop("markersize", con_dict["default_markersize"])
        xy = np.array([(p.x, p.y) for p in parts])
        if mode == "values":
            artist = ax.scatter(xy[:, 0], xy[:, 1], c=part_values, cmap=cmap,
                                s=size ** 2, marker=marker, **kwargs)
        else:
            artist = ax.scatter(xy[:, 0], xy[:, 1], color=colors,
                                s=size ** 2, marker=marker, **kwargs)
        layer = PlotLayer(artist, kind, name, marker=marker_label)

    elif kind is LayerKind.LINES:
        segments = [np.asarray(line.coords)[:, :2] for line in parts]
        kwargs.setdefault("linewidths", con_dict["default_linewidth"])
        if mode == "values":
            artist = LineCollection(segments, cmap=cmap, **kwargs)
            artist.set_array(np.ma.masked_invalid(part_values))
            artist.autoscale_None()
        else:
            artist = LineCollection(segments, colors=[colors], **kwargs)
        ax.add_collection(artist)
        ax.autoscale_view()
        layer = PlotLayer(artist, kind, name)

    else:
        patches = [PathPatch(_polygon_path(poly)) for poly in parts]
        kwargs.setdefault("edgecolor", con_dict["default_strokecolor"])
        kwargs.setdefault("linewidth", con_dict["default_strokewidth"])
        if mode == "values":
            artist = PatchCollection(patches, cmap=cmap, **kwargs)
            artist.set_array(np.ma.masked_invalid(part_values))
            artist.autoscale_None()
        else:
            artist = PatchCollection(patches, facecolor=colors, **kwargs)
        ax.add_collection(artist)
        ax.autoscale_view()
        layer = PlotLayer(artist, kind, name)

    layer.feature_rows = feature_rows
    logger.debug(f"Plotted {len(frame)} features of {name!r} as {kind.value} ({len(feature_rows)} elements)")
    return layer


def plot_raster_dataset(ax, raster: RasterDataset, area_of_interest: Extent | None = None, **kwargs) -> PlotLayer:
    """
    Plot a single-band raster.

    Regular grids are drawn with `imshow`, flipping descending axes so both
    run upwards; rotated grids fall back to `pcolormesh` on the pixel corners.

    Raises
    ------
    ValueError
        If the raster has more than one band, is empty after cropping, or is
        larger than `con_dict["max_raster_cells"]`.
    """
    name = kwargs.pop("name", "")
    if raster.count > 1:
        raise ValueError("Raster dataset with more than two dimensions not supported yet.")

    reduced = raster if area_of_interest is None else raster.crop(area_of_interest)
    if reduced.size == 0:
        raise ValueError("Raster dataset is empty in the requested area.")
    if reduced.size > con_dict["max_raster_cells"]:
        raise ValueError(
            "The given dataset is too large to be plotted!\n"
            "Pyramid rendering of large rasters is not supported yet."
        )

    values = reduced.read()
    kwargs.setdefault("cmap", con_dict["default_colormap"])

    if not reduced.is_regular:
        x, y = reduced.corner_grid()
        artist = ax.pcolormesh(x, y, values, shading="flat", **kwargs)
        return PlotLayer(artist, LayerKind.SURFACE, name)

    x = reduced.x_coords()
    y = reduced.y_coords()
    xreversed = len(x) > 1 and x[0] > x[-1]
    yreversed = len(y) > 1 and y[0] > y[-1]

    # rows run along y, columns along x
    if xreversed:
        values = values[:, ::-1]
    if yreversed:
        values = values[::-1, :]

    left, bottom, right, top = reduced.bounds
    artist = ax.imshow(values, origin="lower", extent=(left, right, bottom, top),
                       interpolation="nearest", **kwargs)
    return PlotLayer(artist, LayerKind.HEATMAP, name)
