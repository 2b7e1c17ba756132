"""
Dataset discovery and loading for geospatial files.

Discovery is a flat walk over a directory that classifies files by extension
into raster and vector datasets, plus a one-level look into subdirectories
for multi-file shapefiles. Vector datasets load eagerly into GeoDataFrames;
rasters load lazily as `RasterDataset` handles that only read pixels when
asked to.
"""

from dataclasses import dataclass, replace
from enum import Enum
import logging
import math
from pathlib import Path
from typing import NamedTuple

import geopandas as gpd
import numpy as np
import pandas as pd
import rasterio
from rasterio.transform import Affine
from rasterio.windows import Window

from ..config import RASTER_EXTENSIONS, VECTOR_EXTENSIONS

logger = logging.getLogger(__name__)


class DatasetKind(Enum):
    RASTER = "raster"
    VECTOR = "vector"


class Extent(NamedTuple):
    """Lat/lon (or map-unit) bounds used to crop rasters and set axis limits."""
    west: float
    east: float
    south: float
    north: float


def _match_extension(name, extensions):
    """Return the longest extension in `extensions` that `name` ends with."""
    lowered = name.lower()
    hits = [ext for ext in extensions if lowered.endswith(ext)]
    if not hits:
        return None
    return max(hits, key=len)


def dataset_name(path):
    """File name with its dataset extension removed (roads.shp.zip -> roads)."""
    name = Path(path).name
    ext = _match_extension(name, RASTER_EXTENSIONS + VECTOR_EXTENSIONS)
    if ext is None:
        return Path(path).stem
    return name[:-len(ext)]


@dataclass(frozen=True)
class DiscoveredDataset:
    kind: DatasetKind
    path: Path

    @property
    def name(self) -> str:
        return dataset_name(self.path)


def discover_datasets(directory) -> list[DiscoveredDataset]:
    """
    Walk through all top-level files in `directory` and discover geospatial datasets.

    Parameters
    ----------
    directory : str or Path
        Folder to scan. Only its direct children are classified; each direct
        subdirectory is additionally searched (non-recursively) for `.shp`
        files, which covers the usual multi-file shapefile layout.

    Returns
    -------
    list of DiscoveredDataset
        Top-level files first (sorted by name), then subdirectory shapefiles.

    Raises
    ------
    NotADirectoryError
        If `directory` does not exist or is not a directory.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(f"{directory} is not a directory")

    children = sorted(directory.iterdir())
    files = [p for p in children if p.is_file()]
    dirs = [p for p in children if p.is_dir()]

    datasets = []
    for file in files:
        if _match_extension(file.name, RASTER_EXTENSIONS):
            datasets.append(DiscoveredDataset(DatasetKind.RASTER, file))
        elif _match_extension(file.name, VECTOR_EXTENSIONS):
            datasets.append(DiscoveredDataset(DatasetKind.VECTOR, file))

    # multi-file datasets, currently only shapefiles
    for sub in dirs:
        for shp_file in sorted(sub.iterdir()):
            if shp_file.is_file() and shp_file.name.lower().endswith(".shp"):
                datasets.append(DiscoveredDataset(DatasetKind.VECTOR, shp_file))

    logger.debug(f"Discovered {len(datasets)} datasets in {directory}")
    return datasets


def numeric_columns(frame) -> list[str]:
    """Non-geometry columns with numeric (or boolean) values that are not all missing."""
    geom_col = frame.geometry.name
    names = []
    for name in frame.columns:
        if name == geom_col:
            continue
        col = frame[name]
        if pd.api.types.is_numeric_dtype(col) and not col.isna().all():
            names.append(name)
    return names


def column_values(frame, column) -> np.ndarray:
    """A numeric column as float, missing values as NaN."""
    col = frame[column]
    if not pd.api.types.is_numeric_dtype(col):
        raise ValueError(f"Column {column} must hold numbers to be used as colour, got {col.dtype}.")
    return pd.to_numeric(col, errors="coerce").to_numpy(dtype=float, na_value=np.nan)


def load_vector_dataset(path) -> gpd.GeoDataFrame:
    path = Path(path)
    ext = _match_extension(path.name, VECTOR_EXTENSIONS)
    logger.debug(f"Loading vector dataset {path.name}")
    if ext in (".parquet", ".pq"):
        return gpd.read_parquet(path)
    if ext in (".arrow", ".feather"):
        return gpd.read_feather(path)
    return gpd.read_file(path)


@dataclass(frozen=True)
class RasterDataset:
    """
    Lazy handle on a single-file raster.

    Only metadata is held in memory; `read()` opens the file and reads band 1
    of the current window. Cropping narrows the window without touching pixels.

    Attributes
    ----------
    path : Path
        Location of the raster on disk.
    transform : Affine
        Pixel -> map transform of the full raster.
    width, height : int
        Full raster size in pixels.
    count : int
        Number of bands.
    crs : object, optional
        Coordinate reference system as reported by rasterio.
    nodata : float, optional
        Value masked out on read.
    window : Window, optional
        Sub-window selected by `crop`; None means the full raster.
    """
    path: Path
    transform: Affine
    width: int
    height: int
    count: int = 1
    crs: object = None
    nodata: float | None = None
    window: Window | None = None

    @property
    def full_window(self) -> Window:
        if self.window is not None:
            return self.window
        return Window(0, 0, self.width, self.height)

    @property
    def shape(self) -> tuple[int, int]:
        win = self.full_window
        return int(win.height), int(win.width)

    @property
    def size(self) -> int:
        rows, cols = self.shape
        return rows * cols

    @property
    def is_regular(self) -> bool:
        return self.transform.b == 0 and self.transform.d == 0

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        x, y = self.corner_grid()
        return float(x.min()), float(y.min()), float(x.max()), float(y.max())

    def crop(self, extent: Extent) -> "RasterDataset":
        """Return a handle restricted to the pixels overlapping `extent`."""
        inverse = ~self.transform
        corners = [
            inverse * (extent.west, extent.south),
            inverse * (extent.west, extent.north),
            inverse * (extent.east, extent.south),
            inverse * (extent.east, extent.north),
        ]
        cols = [c for c, _ in corners]
        rows = [r for _, r in corners]

        win = self.full_window
        col0 = max(math.floor(min(cols)), int(win.col_off))
        col1 = min(math.ceil(max(cols)), int(win.col_off + win.width))
        row0 = max(math.floor(min(rows)), int(win.row_off))
        row1 = min(math.ceil(max(rows)), int(win.row_off + win.height))

        if col1 <= col0 or row1 <= row0:
            new_win = Window(0, 0, 0, 0)
        else:
            new_win = Window(col0, row0, col1 - col0, row1 - row0)
        return replace(self, window=new_win)

    def x_coords(self) -> np.ndarray:
        win = self.full_window
        cols = win.col_off + np.arange(int(win.width)) + 0.5
        return self.transform.c + self.transform.a * cols

    def y_coords(self) -> np.ndarray:
        win = self.full_window
        rows = win.row_off + np.arange(int(win.height)) + 0.5
        return self.transform.f + self.transform.e * rows

    def corner_grid(self) -> tuple[np.ndarray, np.ndarray]:
        """Map coordinates of every pixel corner in the window, shape (rows+1, cols+1)."""
        win = self.full_window
        cols = win.col_off + np.arange(int(win.width) + 1)
        rows = win.row_off + np.arange(int(win.height) + 1)
        cc, rr = np.meshgrid(cols, rows)
        t = self.transform
        x = t.c + t.a * cc + t.b * rr
        y = t.f + t.d * cc + t.e * rr
        return x, y

    def read(self) -> np.ma.MaskedArray:
        with rasterio.open(self.path) as src:
            return src.read(1, window=self.full_window, masked=True)


def load_raster_dataset(path) -> RasterDataset:
    path = Path(path)
    logger.debug(f"Opening raster dataset {path.name}")
    with rasterio.open(path) as src:
        return RasterDataset(
            path=path,
            transform=src.transform,
            width=src.width,
            height=src.height,
            count=src.count,
            crs=src.crs,
            nodata=src.nodata,
        )


def load_dataset(entry: DiscoveredDataset):
    if entry.kind is DatasetKind.RASTER:
        return load_raster_dataset(entry.path)
    return load_vector_dataset(entry.path)
