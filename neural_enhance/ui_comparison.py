"""Original vs. result display (original-only, result-only, side-by-side)."""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QImage, QPixmap, QResizeEvent
from PySide6.QtWidgets import QButtonGroup, QHBoxLayout, QLabel, QPushButton, QSizePolicy, QVBoxLayout, QWidget

from .decoder import decode_image_bytes
from .logger import get_logger
from .models import DisplayMode, ImageState
from .viewer import Pane, panes_for

_logger = get_logger("comparison")

_RGB_CHANNELS = 3
_RGBA_CHANNELS = 4

_VIEW_BUTTONS = (
    (DisplayMode.ORIGINAL, "Original"),
    (DisplayMode.SIDE_BY_SIDE, "Side-by-Side"),
    (DisplayMode.RESULT, "Result"),
)


def pixmap_from_bytes(data: bytes) -> QPixmap:
    """Decode with pyvips; fall back to Qt's own image plugins."""
    arr, error = decode_image_bytes(data)
    if arr is not None:
        arr = np.ascontiguousarray(arr)
        h, w, bands = arr.shape
        fmt = QImage.Format.Format_RGBA8888 if bands == _RGBA_CHANNELS else QImage.Format.Format_RGB888
        qimg = QImage(arr.data, w, h, w * bands, fmt).copy()
        return QPixmap.fromImage(qimg)

    _logger.debug("pyvips decode failed (%s); trying Qt loader", error)
    pix = QPixmap()
    if not pix.loadFromData(data):
        _logger.warning("could not decode image (%d bytes)", len(data))
    return pix


class ImagePane(QWidget):
    """One labelled image scaled to fit its area."""

    def __init__(self, pane: Pane, show_label: bool, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("ImagePane")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.pane = pane
        self._pixmap = pixmap_from_bytes(pane.data)

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.image_label.setSizePolicy(QSizePolicy.Policy.Ignored, QSizePolicy.Policy.Ignored)
        self.image_label.setMinimumSize(QSize(200, 200))

        layout = QVBoxLayout(self)
        if show_label:
            caption = QLabel(pane.label.upper())
            caption.setObjectName("PaneLabel")
            caption.setAlignment(Qt.AlignmentFlag.AlignCenter)
            layout.addWidget(caption)
        layout.addWidget(self.image_label, 1)

    @property
    def pixmap(self) -> QPixmap:
        return self._pixmap

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._rescale()

    def _rescale(self) -> None:
        if self._pixmap.isNull():
            self.image_label.setText("Preview unavailable")
            return
        target = self.image_label.size()
        if target.width() <= 0 or target.height() <= 0:
            return
        self.image_label.setPixmap(
            self._pixmap.scaled(target, Qt.AspectRatioMode.KeepAspectRatio, Qt.TransformationMode.SmoothTransformation)
        )


class ComparisonView(QWidget):
    """Renders committed ImageState; never mutates it."""

    displayModeRequested = Signal(str)

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._image: ImageState | None = None
        self._mode = DisplayMode.RESULT
        self._panes: list[ImagePane] = []

        self._toggle_row = QWidget()
        toggle_layout = QHBoxLayout(self._toggle_row)
        toggle_layout.addStretch()
        self._buttons = QButtonGroup(self)
        self._buttons.setExclusive(True)
        self._button_by_mode: dict[DisplayMode, QPushButton] = {}
        for mode, text in _VIEW_BUTTONS:
            btn = QPushButton(text)
            btn.setObjectName("ViewButton")
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, m=mode: self.displayModeRequested.emit(m.value))
            self._buttons.addButton(btn)
            self._button_by_mode[mode] = btn
            toggle_layout.addWidget(btn)
        toggle_layout.addStretch()

        self._pane_row = QHBoxLayout()
        self._pane_row.setSpacing(16)

        layout = QVBoxLayout(self)
        layout.addWidget(self._toggle_row)
        layout.addLayout(self._pane_row, 1)

    @property
    def panes(self) -> list[ImagePane]:
        return list(self._panes)

    @property
    def display_mode(self) -> DisplayMode:
        return self._mode

    def set_display_mode(self, mode: DisplayMode | str) -> None:
        self._mode = DisplayMode(mode)
        self._rebuild_panes()

    def set_image(self, image: ImageState) -> None:
        self._image = image
        self._rebuild_panes()

    def _rebuild_panes(self) -> None:
        for pane in self._panes:
            self._pane_row.removeWidget(pane)
            pane.deleteLater()
        self._panes = []

        image = self._image
        has_result = image is not None and image.has_result
        self._toggle_row.setVisible(has_result)
        self._button_by_mode[self._mode].setChecked(True)
        if image is None:
            return

        visible = panes_for(image, self._mode)
        for pane in visible:
            widget = ImagePane(pane, show_label=len(visible) > 1, parent=self)
            self._pane_row.addWidget(widget, 1)
            self._panes.append(widget)
