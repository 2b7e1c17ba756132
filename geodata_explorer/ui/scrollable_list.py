"""
ScrollableList: a custom-painted, scrollable layer list.

Each row shows an icon, a label and a chevron. Clicking a row toggles its
hidden flag; clicking the chevron (the right 10% of the row) requests the
configure window for that row. The wheel scrolls the rows, clamped so the
list never scrolls past its first or last row.

Usage::

    sl = ScrollableList(items=[("■", "elevation"), ("●", "roads")])
    sl.itemClicked.connect(lambda idx, action: print(idx, action))
    sl.configureClicked.connect(lambda idx: print("configure", idx))

Hit-testing and scroll clamping are plain functions (`pick_entry`,
`clamp_offset`) so the geometry can be reasoned about without a widget.
"""
import logging
import math

from PyQt5.QtCore import QRectF, QSize, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QFontMetrics, QPainter, QPen
from PyQt5.QtWidgets import QSizePolicy, QWidget

from ..config import con_dict

logger = logging.getLogger(__name__)


def clamp_offset(offset, list_height, viewport_height):
    """Keep the scroll offset between the top row and the last full page."""
    upper = max(0.0, float(list_height) - float(viewport_height))
    return min(max(float(offset), 0.0), upper)


def pick_entry(y, offset, item_height, n_items):
    """Row index under widget-space `y`, or None past the last row."""
    if n_items == 0 or item_height <= 0:
        return None
    content_y = y + offset
    if content_y < 0:
        return None
    idx = int(math.floor(content_y / item_height))
    return idx if idx < n_items else None


def _to_qcolor(value):
    if isinstance(value, QColor):
        return QColor(value)
    if isinstance(value, (tuple, list)):
        return QColor.fromRgbF(*[float(v) for v in value])
    return QColor(value)


class ScrollableList(QWidget):
    """
    Scrollable selection list of (icon, label) rows.

    Emits
    -----
    itemClicked(int, str)
        A row body was clicked; the action is "hide" or "show" (the new state).
    configureClicked(int)
        The chevron of a row was clicked.
    hiddenChanged(list)
        The hidden flags changed through a click.

    The optional `on_item_click(idx, action)` and `on_configure_click(idx)`
    callables are invoked alongside the signals.
    """

    itemClicked = pyqtSignal(int, str)
    configureClicked = pyqtSignal(int)
    hiddenChanged = pyqtSignal(list)

    def __init__(
        self,
        parent=None,
        items=None,
        item_height=None,
        width=None,
        height=None,
        fontsize=14.0,
        icon_fontsize=18.0,
        textpadding=(12, 40, 8, 8),
        cell_color=(0.95, 0.95, 0.95),
        cell_color_hover=(0.88, 0.88, 0.88),
        cell_color_hidden=(0.7, 0.7, 0.7),
        chevron_color=(0.5, 0.5, 0.5),
        textcolor="black",
        scroll_speed=None,
        strokecolor=(0.85, 0.85, 0.85),
        strokewidth=1,
        hidden=None,
        on_item_click=None,
        on_configure_click=None,
    ):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setSizePolicy(QSizePolicy.Preferred, QSizePolicy.Expanding)

        self.fontsize = float(fontsize)
        self.icon_fontsize = float(icon_fontsize)
        self.textpadding = tuple(textpadding)
        self.cell_color = _to_qcolor(cell_color)
        self.cell_color_hover = _to_qcolor(cell_color_hover)
        self.cell_color_hidden = _to_qcolor(cell_color_hidden)
        self.chevron_color = _to_qcolor(chevron_color)
        self.textcolor = _to_qcolor(textcolor)
        self.strokecolor = _to_qcolor(strokecolor)
        self.strokewidth = float(strokewidth)
        self.scroll_speed = float(con_dict["list_scroll_speed"] if scroll_speed is None else scroll_speed)
        self.on_item_click = on_item_click
        self.on_configure_click = on_configure_click

        self._item_height = int(con_dict["list_item_height"] if item_height is None else item_height)
        self._items = []
        self._hidden = []
        self._offset = 0.0
        self._hovered = None
        self._pressed = False

        if width is not None:
            self.setFixedWidth(int(width))
        if height is not None:
            self.setFixedHeight(int(height))

        self.items = items if items is not None else [("●", "Item 1"), ("●", "Item 2")]
        if hidden is not None:
            self.hidden = hidden

    # ------------------------------------------------------------------ state

    @property
    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    @items.setter
    def items(self, items):
        self._items = [(str(icon), str(label)) for icon, label in items]
        if len(self._hidden) != len(self._items):
            self._hidden = [False] * len(self._items)
        if self._hovered is not None and self._hovered >= len(self._items):
            self._hovered = None
        self._clamp()
        self.updateGeometry()
        self.update()

    @property
    def hidden(self) -> list[bool]:
        return list(self._hidden)

    @hidden.setter
    def hidden(self, flags):
        flags = [bool(f) for f in flags]
        if len(flags) != len(self._items):
            raise ValueError(f"Expected {len(self._items)} hidden flags, got {len(flags)}")
        self._hidden = flags
        self.update()

    @property
    def item_height(self) -> int:
        return self._item_height

    @item_height.setter
    def item_height(self, value):
        self._item_height = int(value)
        self._clamp()
        self.updateGeometry()
        self.update()

    @property
    def list_height(self) -> int:
        return len(self._items) * self._item_height

    @property
    def scroll_offset(self) -> float:
        return self._offset

    @property
    def hovered(self):
        return self._hovered

    def _clamp(self):
        self._offset = clamp_offset(self._offset, self.list_height, self.height())

    def scroll_to(self, offset):
        self._offset = clamp_offset(offset, self.list_height, self.height())
        self.update()

    def scroll_by(self, steps):
        """Scroll by wheel notches; positive steps move towards the top."""
        self.scroll_to(self._offset - self.scroll_speed * steps)

    def pick_entry(self, y):
        return pick_entry(y, self._offset, self._item_height, len(self._items))

    def row_color(self, idx) -> QColor:
        if idx < len(self._hidden) and self._hidden[idx]:
            return self.cell_color_hidden
        if idx == self._hovered:
            return self.cell_color_hover
        return self.cell_color

    def toggle(self, idx):
        """Flip the hidden flag of row `idx` and notify listeners."""
        self._hidden[idx] = not self._hidden[idx]
        action = "hide" if self._hidden[idx] else "show"
        self.hiddenChanged.emit(list(self._hidden))
        self.itemClicked.emit(idx, action)
        if self.on_item_click is not None:
            self.on_item_click(idx, action)
        self.update()

    def _request_configure(self, idx):
        self.configureClicked.emit(idx)
        if self.on_configure_click is not None:
            self.on_configure_click(idx)

    # ------------------------------------------------------------------ sizing

    def sizeHint(self):
        h = min(self.list_height, int(con_dict["list_max_autoheight"]))
        return QSize(int(con_dict["list_width"]), h)

    def minimumSizeHint(self):
        return QSize(60, self._item_height)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._clamp()

    # ------------------------------------------------------------------ events

    def _set_hovered(self, idx):
        if idx != self._hovered:
            self._hovered = idx
            self.update()

    def mouseMoveEvent(self, event):
        pos = event.pos()
        if self.rect().contains(pos):
            self._set_hovered(self.pick_entry(pos.y()))
        else:
            self._set_hovered(None)

    def mousePressEvent(self, event):
        self._pressed = event.button() == Qt.LeftButton
        event.accept()

    def mouseReleaseEvent(self, event):
        pos = event.pos()
        clicked = (
            event.button() == Qt.LeftButton
            and self._pressed
            and self.rect().contains(pos)
        )
        self._pressed = False
        event.accept()
        if not clicked:
            return

        idx = self.pick_entry(pos.y())
        if idx is None:
            return
        if pos.x() > self.width() * float(con_dict["chevron_fraction"]):
            self._request_configure(idx)
        else:
            self.toggle(idx)
        self._set_hovered(idx)

    def leaveEvent(self, event):
        self._pressed = False
        self._set_hovered(None)
        super().leaveEvent(event)

    def wheelEvent(self, event):
        steps = event.angleDelta().y() / 120.0
        self.scroll_by(steps)
        pos = event.position().toPoint()
        self._set_hovered(self.pick_entry(pos.y()))
        event.accept()

    # ------------------------------------------------------------------ painting

    def _font(self, pixel_size):
        font = QFont(self.font())
        font.setPixelSize(max(1, int(round(pixel_size))))
        return font

    def row_rects(self, idx):
        """
        Widget-space rectangles of row `idx`: (row, icon, label, chevron).

        Icon and label are inset by the left/right padding horizontally and
        by the top/bottom padding vertically.
        """
        w = self.width()
        ih = self._item_height
        pad_left, pad_right, pad_bottom, pad_top = self.textpadding
        top = idx * ih - self._offset
        text_top = top + pad_top
        text_h = max(0.0, ih - pad_top - pad_bottom)
        label_x = pad_left + self.icon_fontsize + 8
        label_w = max(0.0, w - label_x - pad_right)
        return (
            QRectF(0, top, w, ih),
            QRectF(pad_left, text_top, self.icon_fontsize + 8, text_h),
            QRectF(label_x, text_top, label_w, text_h),
            QRectF(w - 30, top, 20, ih),
        )

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.TextAntialiasing)

        ih = self._item_height
        n = len(self._items)
        if n == 0 or ih <= 0:
            painter.end()
            return

        first = max(0, int(self._offset // ih))
        last = min(n, int((self._offset + self.height()) // ih) + 1)

        icon_font = self._font(self.icon_fontsize)
        label_font = self._font(self.fontsize)
        chevron_font = self._font(20)
        metrics = QFontMetrics(label_font)

        border = QPen(self.strokecolor)
        border.setWidthF(self.strokewidth)

        for i in range(first, last):
            rect, icon_rect, label_rect, chevron_rect = self.row_rects(i)
            painter.fillRect(rect, self.row_color(i))
            if self.strokewidth > 0:
                painter.setPen(border)
                painter.setBrush(Qt.NoBrush)
                painter.drawRect(rect)

            icon, label = self._items[i]
            painter.setPen(self.textcolor)
            painter.setFont(icon_font)
            painter.drawText(icon_rect, Qt.AlignLeft | Qt.AlignVCenter, icon)
            painter.setFont(label_font)
            elided = metrics.elidedText(label, Qt.ElideRight, int(label_rect.width()))
            painter.drawText(label_rect, Qt.AlignLeft | Qt.AlignVCenter, elided)

            painter.setPen(self.chevron_color)
            painter.setFont(chevron_font)
            painter.drawText(chevron_rect, Qt.AlignCenter, ">")

        painter.end()
