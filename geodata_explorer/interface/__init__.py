"""
GeoData Explorer Interface Package
==================================

The layer between loaded datasets, the plotting canvas and the widgets.

It provides:

- ``plotting``
  Geometry-type dispatch and the functions that draw vector and raster
  datasets on a matplotlib Axes, returning ``PlotLayer`` objects.

- ``handlers``
  ``OnClickHideHandler`` and ``OnClickConfigureHandler``, the callables the
  layer list invokes when a row or its chevron is clicked.

Typical Usage
-------------
::

    layer = plot_vector_dataset(ax, frame)
    sl = ScrollableList(items=[("●", "roads")],
                        on_item_click=OnClickHideHandler([layer]),
                        on_configure_click=OnClickConfigureHandler([layer]))
"""

from .handlers import OnClickConfigureHandler, OnClickHideHandler
from .plotting import (
    geometry_kind,
    plot_raster_dataset,
    plot_vector_dataset,
    resolve_color,
)

__all__ = [
    "OnClickConfigureHandler",
    "OnClickHideHandler",
    "geometry_kind",
    "plot_raster_dataset",
    "plot_vector_dataset",
    "resolve_color",
]
