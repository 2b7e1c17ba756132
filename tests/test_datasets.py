import numpy as np
import pytest
from rasterio.windows import Window

from geodata_explorer.models import (
    DatasetKind,
    Extent,
    column_values,
    dataset_name,
    discover_datasets,
    load_dataset,
    load_raster_dataset,
    load_vector_dataset,
    numeric_columns,
)


# ---------------------------------------------------------------- discovery

def test_discover_order_and_kinds(data_dir):
    found = discover_datasets(data_dir)
    assert [(d.kind, d.name) for d in found] == [
        (DatasetKind.RASTER, "elevation"),
        (DatasetKind.VECTOR, "parcels"),
        (DatasetKind.VECTOR, "wells"),
        (DatasetKind.VECTOR, "roads"),
    ]
    assert found[-1].path.parent.name == "roads"


def test_discover_only_one_level_of_subdirectories(tmp_path, line_frame):
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)
    line_frame.to_file(deep / "hidden.shp")
    assert discover_datasets(tmp_path) == []


def test_discover_extension_matching(tmp_path):
    for name in ["DEM.TIF", "roads.shp.zip", "grid.nc", "table.csv", "archive.zip"]:
        (tmp_path / name).write_bytes(b"")
    found = {d.name: d.kind for d in discover_datasets(tmp_path)}
    assert found == {
        "DEM": DatasetKind.RASTER,
        "grid": DatasetKind.RASTER,
        "roads": DatasetKind.VECTOR,
    }


def test_discover_empty_directory(tmp_path):
    assert discover_datasets(tmp_path) == []


def test_discover_missing_directory(tmp_path):
    with pytest.raises(NotADirectoryError):
        discover_datasets(tmp_path / "nope")


@pytest.mark.parametrize("path, expected", [
    ("/data/roads.shp.zip", "roads"),
    ("/data/dem.tif", "dem"),
    ("/data/cover.parquet", "cover"),
    ("/data/notes.txt", "notes"),
])
def test_dataset_name(path, expected):
    assert dataset_name(path) == expected


# ---------------------------------------------------------------- vectors

def test_load_vector_geojson(data_dir):
    frame = load_vector_dataset(data_dir / "parcels.geojson")
    assert len(frame) == 9
    assert set(frame.geom_type) == {"Polygon"}


def test_load_vector_parquet(tmp_path, point_frame):
    path = tmp_path / "wells.parquet"
    point_frame.to_parquet(path)
    frame = load_vector_dataset(path)
    assert list(frame["depth"]) == [5.0, 15.0, 25.0, 35.0]


def test_numeric_columns(poly_frame):
    assert numeric_columns(poly_frame) == ["population", "rank"]


def test_numeric_columns_none(poly_frame):
    frame = poly_frame[["name", "geometry"]]
    assert numeric_columns(frame) == []


def test_column_values(poly_frame):
    values = column_values(poly_frame, "rank")
    assert values.dtype == float
    assert values[0] == 9.0


def test_column_values_rejects_text(poly_frame):
    with pytest.raises(ValueError, match="must hold numbers"):
        column_values(poly_frame, "name")


# ---------------------------------------------------------------- rasters

def test_load_raster_metadata(raster_path):
    raster = load_raster_dataset(raster_path)
    assert raster.shape == (10, 20)
    assert raster.size == 200
    assert raster.count == 1
    assert raster.is_regular
    assert raster.bounds == (0.0, 0.0, 20.0, 10.0)


def test_raster_coords(raster_path):
    raster = load_raster_dataset(raster_path)
    np.testing.assert_allclose(raster.x_coords(), np.arange(20) + 0.5)
    # north-up rasters store rows top to bottom
    np.testing.assert_allclose(raster.y_coords(), 9.5 - np.arange(10))


def test_raster_crop(raster_path):
    raster = load_raster_dataset(raster_path)
    cropped = raster.crop(Extent(2.5, 5, 3, 7))
    assert cropped.window == Window(2, 3, 3, 4)
    assert cropped.shape == (4, 3)
    assert cropped.bounds == (2.0, 3.0, 5.0, 7.0)
    # cropping returns a new handle
    assert raster.shape == (10, 20)

    values = cropped.read()
    assert values.shape == (4, 3)
    assert values[0, 0] == 302


def test_raster_crop_clips_to_raster(raster_path):
    raster = load_raster_dataset(raster_path)
    cropped = raster.crop(Extent(-100, 100, -100, 100))
    assert cropped.shape == (10, 20)


def test_raster_crop_of_crop_stays_inside(raster_path):
    raster = load_raster_dataset(raster_path)
    cropped = raster.crop(Extent(0, 5, 0, 5)).crop(Extent(3, 50, 3, 50))
    assert cropped.bounds == (3.0, 3.0, 5.0, 5.0)


def test_raster_crop_outside(raster_path):
    raster = load_raster_dataset(raster_path)
    cropped = raster.crop(Extent(100, 110, 100, 110))
    assert cropped.size == 0


def test_raster_read_masks_nodata(nodata_raster_path):
    values = load_raster_dataset(nodata_raster_path).read()
    assert isinstance(values, np.ma.MaskedArray)
    assert values.mask[0, 0]
    assert not values.mask[1, 1]


def test_rotated_raster_is_irregular(rotated_raster_path):
    assert not load_raster_dataset(rotated_raster_path).is_regular


def test_load_dataset_dispatch(data_dir):
    loaded = [load_dataset(d) for d in discover_datasets(data_dir)]
    assert loaded[0].shape == (10, 20)
    assert len(loaded[1]) == 9
    assert len(loaded[3]) == 3
