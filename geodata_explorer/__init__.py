"""
GeoData Explorer application package.

A Qt desktop viewer that plots every geospatial dataset in a folder on one
map, with a layer list for hiding/showing layers and a configure popup for
editing their appearance.

Subpackages
-----------
- models
    Dataset discovery and loading (`discover_datasets`, lazy
    `RasterDataset` handles, GeoDataFrames for vectors) and `PlotLayer`,
    the editable wrapper around a plotted matplotlib artist.

- interface
    Geometry-type dispatch and the functions that plot vector and raster
    datasets, plus the click handlers that connect the layer list to layers.

- ui
    Qt widgets: the custom-painted `ScrollableList`, the `ConfigureWindow`
    popup and the `MapCanvas`.

Other modules
-------------
- config
    Single in-memory configuration dictionary (con_dict), curated option
    lists (colormaps, colour scales, markers, file extensions) and helpers
    to load, mutate and persist settings.

- main
    `ExplorerWindow`, `load_and_plot()` and the `main()` command-line entry
    point.

Typical usage
-------------
    geodata-explorer /path/to/data --extent -122 -121 37 38

or, from Python inside a running QApplication:

    from geodata_explorer.main import load_and_plot
    win = load_and_plot("/path/to/data")
    win.show()
"""
