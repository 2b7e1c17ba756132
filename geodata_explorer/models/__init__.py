"""
GeoData Explorer models package.

Data-side structures: discovered datasets, lazily opened rasters and the
plot layers that wrap matplotlib artists.

Classes
-------
DatasetKind
    RASTER or VECTOR.
DiscoveredDataset
    A file found by `discover_datasets`, with its kind and display name.
Extent
    (west, east, south, north) bounds used for cropping and axis limits.
RasterDataset
    Lazy single-band raster handle; pixels are read on demand.
LayerKind
    Which plotting path produced a layer (scatter, lines, poly, heatmap, surface).
PlotLayer
    Editable visual attributes over one matplotlib artist.
"""

from .dataset import (
    DatasetKind,
    DiscoveredDataset,
    Extent,
    RasterDataset,
    column_values,
    dataset_name,
    discover_datasets,
    load_dataset,
    load_raster_dataset,
    load_vector_dataset,
    numeric_columns,
)
from .layer import LayerKind, PlotLayer

__all__ = [
    "DatasetKind",
    "DiscoveredDataset",
    "Extent",
    "RasterDataset",
    "column_values",
    "dataset_name",
    "discover_datasets",
    "load_dataset",
    "load_raster_dataset",
    "load_vector_dataset",
    "numeric_columns",
    "LayerKind",
    "PlotLayer",
]
