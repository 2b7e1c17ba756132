"""
Entry point and main window for GeoData Explorer.

This module defines `ExplorerWindow`, the top-level Qt window that shows a
folder of geospatial datasets on one map with a layer list beside it, and
`load_and_plot`, which builds that window from a directory:

    - discover raster and vector datasets in the folder
    - load them (cropping rasters to an optional extent)
    - plot each as a layer on the shared map axes
    - list the layers; clicking a row hides/shows it, clicking its chevron
      opens the configure window for that layer

Run this module directly via:

    python -m geodata_explorer.main /path/to/data --extent -122 -121 37 38

or call `load_and_plot()` from your own Qt application.
"""
import argparse
import logging
import sys

from pyogrio.errors import DataSourceError
from rasterio.errors import RasterioError
from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QApplication,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from . import config
from .interface import (
    OnClickConfigureHandler,
    OnClickHideHandler,
    plot_raster_dataset,
    plot_vector_dataset,
)
from .models import DatasetKind, Extent, discover_datasets, load_dataset
from .ui import MapCanvas, ScrollableList, busy_cursor

logger = logging.getLogger(__name__)

ICONS = {DatasetKind.RASTER: "■", DatasetKind.VECTOR: "●"}

# errors raised by files that exist but cannot be opened or decoded
READ_ERRORS = (OSError, DataSourceError, RasterioError)


class ExplorerWindow(QMainWindow):
    """
    Main window: map canvas on the left, layer list on the right.

    Attributes
    ----------
    canvas : MapCanvas
        The map widget; `canvas.ax` is the shared Axes.
    layer_list : ScrollableList
        One row per plotted layer.
    layers, datasets, kinds, names : list
        Parallel lists, one entry per row of `layer_list`.
    config_windows : list
        Open configure windows (kept referenced until they close).
    """
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("GeoData Explorer")
        self.resize(config.get_value("window_width"), config.get_value("window_height"))

        self.layers = []
        self.datasets = []
        self.kinds = []
        self.names = []
        self.config_windows = []
        self.skipped = []

        central = QWidget(self)
        outer = QVBoxLayout(central)
        outer.setContentsMargins(0, 0, 0, 0)
        self.setCentralWidget(central)

        self._splitter = QSplitter(Qt.Horizontal, self)
        outer.addWidget(self._splitter)

        self.canvas = MapCanvas(self)
        self._splitter.addWidget(self.canvas)

        self.layer_list = ScrollableList(self, items=[], width=config.get_value("list_width"))
        self.layer_list.on_item_click = OnClickHideHandler(self.layers)
        self.layer_list.on_configure_click = self.configure_layer
        self._splitter.addWidget(self.layer_list)
        self._splitter.setStretchFactor(0, 1)
        self._splitter.setStretchFactor(1, 0)

        self.statusBar().showMessage("Ready.")

    @property
    def ax(self):
        return self.canvas.ax

    def add_layer(self, layer, dataset, kind, name):
        self.layers.append(layer)
        self.datasets.append(dataset)
        self.kinds.append(kind)
        self.names.append(name)
        self.layer_list.items = [(ICONS[k], n) for k, n in zip(self.kinds, self.names)]

    def configure_layer(self, idx):
        """Open the configure window for row `idx`; vector layers get their dataset."""
        datasets = [d if k is DatasetKind.VECTOR else None for d, k in zip(self.datasets, self.kinds)]
        handler = OnClickConfigureHandler(self.layers, datasets, parent=self)
        try:
            win = handler(idx)
        except Exception as e:
            logger.error(f"Failed to open configure window for layer {idx}", exc_info=True)
            QMessageBox.warning(self, "Configure layer", f"Failed to configure {self.names[idx]}: {e}")
            return None
        self.config_windows.append(win)
        win.destroyed.connect(lambda _obj=None, w=win: self._on_config_window_destroyed(w))
        return win

    def _on_config_window_destroyed(self, win):
        try:
            self.config_windows.remove(win)
        except ValueError:
            pass


def load_and_plot(directory, extent=None, parent=None) -> ExplorerWindow:
    """
    Scan a folder for geospatial datasets, plot them on a map, and build a
    window with a scrollable layer list for visibility toggling and configuration.

    Parameters
    ----------
    directory : str or Path
        Folder containing geospatial files.
    extent : Extent or tuple, optional
        (west, east, south, north) bounds. Rasters are cropped to it (and
        skipped if they do not intersect it); axis limits are set to it.
    parent : QWidget, optional

    Returns
    -------
    ExplorerWindow
        Not yet shown; call `.show()`.
    """
    if extent is not None and not isinstance(extent, Extent):
        extent = Extent(*extent)

    discovered = discover_datasets(directory)
    logger.info(f"Found {len(discovered)} datasets in {directory}")

    win = ExplorerWindow(parent)
    with busy_cursor("Loading datasets...", win):
        for entry in discovered:
            name = entry.name
            try:
                data = load_dataset(entry)
            except (ValueError, *READ_ERRORS):
                logger.warning(f"Skipping {name}: could not read {entry.path}", exc_info=True)
                win.skipped.append(name)
                continue
            if entry.kind is DatasetKind.RASTER and extent is not None:
                data = data.crop(extent)
                if data.size == 0:
                    logger.warning(f"Raster {name} does not intersect extent, skipping")
                    win.skipped.append(name)
                    continue
            try:
                if entry.kind is DatasetKind.RASTER:
                    layer = plot_raster_dataset(win.ax, data, name=name)
                else:
                    layer = plot_vector_dataset(win.ax, data, name=name)
            except ValueError as e:
                logger.warning(f"Skipping {name}: {e}")
                win.skipped.append(name)
                continue
            except READ_ERRORS:
                logger.warning(f"Skipping {name}: could not read pixels from {entry.path}", exc_info=True)
                win.skipped.append(name)
                continue
            win.add_layer(layer, data, entry.kind, name)

    if extent is not None:
        win.canvas.set_extent(extent)
    win.canvas.draw()

    msg = f"{len(win.layers)} layers loaded"
    if win.skipped:
        msg += f", {len(win.skipped)} skipped"
    win.statusBar().showMessage(msg)
    return win


def build_parser():
    parser = argparse.ArgumentParser(
        prog="geodata-explorer",
        description="Plot every geospatial dataset in a folder with a layer list.",
    )
    parser.add_argument("directory", help="Folder containing raster and vector datasets")
    parser.add_argument("--extent", nargs=4, type=float, metavar=("WEST", "EAST", "SOUTH", "NORTH"),
                        help="Crop rasters and limit the map to these bounds")
    parser.add_argument("--config", help="JSON file overriding default settings")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if args.config:
        config.load_config(args.config)

    app = QApplication(sys.argv)
    extent = Extent(*args.extent) if args.extent else None
    win = load_and_plot(args.directory, extent=extent)
    win.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
