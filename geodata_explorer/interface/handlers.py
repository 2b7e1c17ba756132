"""
Click handlers connecting the layer list to plot layers.

Both handlers are plain callables so they can be passed straight to the
`on_item_click` / `on_configure_click` hooks of `ScrollableList`.
"""
import logging

from ..ui.configure_window import configure

logger = logging.getLogger(__name__)


class OnClickHideHandler:
    """
    Hide or show the layer at the clicked index.

    Parameters
    ----------
    layers : list of PlotLayer
        Layers in the same order as the list items.
    """
    def __init__(self, layers):
        self.layers = layers

    def __call__(self, idx, action):
        logger.info(f"Item {idx} clicked: {action}")
        layer = self.layers[idx]
        layer.visible = action != "hide"
        layer.redraw()


class OnClickConfigureHandler:
    """Open the configure window for the layer at the clicked index."""
    def __init__(self, layers, datasets=None, parent=None):
        self.layers = layers
        self.datasets = datasets
        self.parent = parent

    def __call__(self, idx):
        logger.info(f"Item {idx} clicked: configure")
        dataset = self.datasets[idx] if self.datasets is not None else None
        return configure(self.layers[idx], dataset=dataset, parent=self.parent)
