import logging

import pytest

from geodata_explorer.interface import OnClickConfigureHandler, OnClickHideHandler, plot_vector_dataset
from geodata_explorer.ui import ConfigureWindow


@pytest.fixture
def layers(ax, poly_frame, point_frame):
    return [
        plot_vector_dataset(ax, poly_frame, name="parcels"),
        plot_vector_dataset(ax, point_frame, name="wells"),
    ]


def test_hide_handler(layers, caplog):
    handler = OnClickHideHandler(layers)
    with caplog.at_level(logging.INFO, logger="geodata_explorer.interface.handlers"):
        handler(1, "hide")
    assert layers[0].visible
    assert not layers[1].visible
    assert "Item 1 clicked: hide" in caplog.text

    handler(1, "show")
    assert layers[1].visible


def test_hide_handler_sees_appended_layers(ax, poly_frame):
    layers = []
    handler = OnClickHideHandler(layers)
    layers.append(plot_vector_dataset(ax, poly_frame))
    handler(0, "hide")
    assert not layers[0].visible


def test_configure_handler(qapp, layers, poly_frame):
    handler = OnClickConfigureHandler(layers, [poly_frame, None])
    win = handler(0)
    try:
        assert isinstance(win, ConfigureWindow)
        assert win.layer is layers[0]
        assert win.dataset is poly_frame
        assert win.color_by_menu is not None
    finally:
        win.close()


def test_configure_handler_without_datasets(qapp, layers):
    win = OnClickConfigureHandler(layers)(1)
    try:
        assert win.dataset is None
        assert win.marker_menu.currentText() == "circle"
    finally:
        win.close()
