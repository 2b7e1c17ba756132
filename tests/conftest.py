"""
Shared fixtures for the GeoData Explorer tests.

Qt runs on the offscreen platform so the widget tests work without a display.
Datasets are small synthetic files written into pytest's tmp_path.
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import logging

import geopandas as gpd
import numpy as np
import pytest
import rasterio
from matplotlib.figure import Figure
from rasterio.transform import Affine, from_origin
from shapely.geometry import LineString, MultiPolygon, Point, box

from PyQt5.QtWidgets import QApplication

from geodata_explorer import config

logging.getLogger("rasterio").setLevel(logging.WARNING)
logging.getLogger("fiona").setLevel(logging.WARNING)
logging.getLogger("pyogrio").setLevel(logging.WARNING)


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture(autouse=True)
def restore_config():
    saved = dict(config.con_dict)
    yield
    config.con_dict.clear()
    config.con_dict.update(saved)


@pytest.fixture
def ax():
    return Figure().add_subplot(111)


@pytest.fixture
def poly_frame():
    """3x3 unit squares with a few attribute columns."""
    polys = [box(c, r, c + 1, r + 1) for r in range(3) for c in range(3)]
    return gpd.GeoDataFrame(
        {
            "name": [f"cell{i}" for i in range(9)],
            "population": np.arange(1, 10) * 100.0,
            "rank": np.arange(9, 0, -1),
            "empty": np.full(9, np.nan),
        },
        geometry=polys,
        crs="EPSG:4326",
    )


@pytest.fixture
def point_frame():
    pts = [Point(1.5, 2.5), Point(4.0, 6.0), Point(8.0, 3.0), Point(12.0, 9.0)]
    return gpd.GeoDataFrame(
        {"depth": [5.0, 15.0, 25.0, 35.0], "site": ["a", "b", "c", "d"]},
        geometry=pts,
        crs="EPSG:4326",
    )


@pytest.fixture
def line_frame():
    lines = [
        LineString([(0, 0), (5, 5), (10, 5)]),
        LineString([(2, 8), (18, 8)]),
        LineString([(15, 1), (19, 9)]),
    ]
    return gpd.GeoDataFrame(
        {"lanes": [1, 2, 4], "label": ["x", "y", "z"]},
        geometry=lines,
        crs="EPSG:4326",
    )


@pytest.fixture
def multipoly_frame():
    geoms = [
        MultiPolygon([box(0, 0, 1, 1), box(2, 0, 3, 1)]),
        box(5, 5, 6, 6),
    ]
    return gpd.GeoDataFrame({"value": [1.0, 2.0]}, geometry=geoms, crs="EPSG:4326")


def write_raster(path, data, transform, nodata=None, crs="EPSG:4326"):
    data = np.asarray(data)
    if data.ndim == 2:
        data = data[np.newaxis, ...]
    count, height, width = data.shape
    with rasterio.open(
        path, "w", driver="GTiff", height=height, width=width, count=count,
        dtype=data.dtype, crs=crs, transform=transform, nodata=nodata,
    ) as dst:
        dst.write(data)
    return path


def ramp(height=10, width=20):
    """value = row * 100 + col, so every pixel is identifiable."""
    rows, cols = np.mgrid[0:height, 0:width]
    return (rows * 100 + cols).astype("float32")


@pytest.fixture
def raster_path(tmp_path):
    """North-up 10x20 raster covering x 0..20, y 0..10."""
    return write_raster(tmp_path / "elevation.tif", ramp(), from_origin(0, 10, 1, 1))


@pytest.fixture
def nodata_raster_path(tmp_path):
    data = ramp(4, 4)
    data[0, 0] = -9999
    return write_raster(tmp_path / "holes.tif", data, from_origin(0, 4, 1, 1), nodata=-9999)


@pytest.fixture
def multiband_raster_path(tmp_path):
    data = np.stack([ramp(4, 4), ramp(4, 4)])
    return write_raster(tmp_path / "bands.tif", data, from_origin(0, 4, 1, 1))


@pytest.fixture
def rotated_raster_path(tmp_path):
    transform = Affine(1.0, 0.2, 0.0, 0.2, -1.0, 10.0)
    return write_raster(tmp_path / "rotated.tif", ramp(5, 5), transform)


@pytest.fixture
def data_dir(tmp_path, poly_frame, point_frame, line_frame):
    """
    A folder with one raster, two top-level vectors, a shapefile one level
    down and some files that are not datasets.
    """
    root = tmp_path / "data"
    root.mkdir()
    write_raster(root / "elevation.tif", ramp(), from_origin(0, 10, 1, 1))
    poly_frame.to_file(root / "parcels.geojson", driver="GeoJSON")
    point_frame.to_file(root / "wells.gpkg", driver="GPKG")
    (root / "notes.txt").write_text("not a dataset")

    sub = root / "roads"
    sub.mkdir()
    line_frame.to_file(sub / "roads.shp")
    (sub / "readme.md").write_text("roads of the area")
    return root
