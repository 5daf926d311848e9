from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QDragEnterEvent, QDropEvent, QMouseEvent
from PySide6.QtWidgets import QFileDialog, QLabel, QVBoxLayout, QWidget

from .file_operations import IMAGE_FILE_FILTER, is_image_file


class DropZone(QWidget):
    """Empty-state upload area: drop an image file or click to browse."""

    fileSelected = Signal(str)

    def __init__(self, parent: QWidget | None = None, start_dir: str = ""):
        super().__init__(parent)
        self.setObjectName("DropZone")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setAcceptDrops(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setMinimumHeight(300)
        self.start_dir = start_dir

        title = QLabel("Upload an Image")
        title.setObjectName("AppTitle")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        hint = QLabel("Drag and drop here, or click to browse. Supports JPG, PNG, WEBP.")
        hint.setObjectName("FooterNote")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        hint.setWordWrap(True)

        layout = QVBoxLayout(self)
        layout.addStretch()
        layout.addWidget(title)
        layout.addWidget(hint)
        layout.addStretch()

    def _set_dragging(self, dragging: bool) -> None:
        self.setProperty("dragging", "true" if dragging else "false")
        # Re-polish so the [dragging="true"] selector is re-evaluated
        self.style().unpolish(self)
        self.style().polish(self)

    @staticmethod
    def _first_local_file(event: QDragEnterEvent | QDropEvent) -> str | None:
        mime = event.mimeData()
        if not mime.hasUrls():
            return None
        for url in mime.urls():
            if url.isLocalFile():
                return url.toLocalFile()
        return None

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        path = self._first_local_file(event)
        if path and is_image_file(path):
            self._set_dragging(True)
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragLeaveEvent(self, event) -> None:
        self._set_dragging(False)
        super().dragLeaveEvent(event)

    def dropEvent(self, event: QDropEvent) -> None:
        self._set_dragging(False)
        path = self._first_local_file(event)
        if path:
            event.acceptProposedAction()
            self.fileSelected.emit(path)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.browse()
        super().mouseReleaseEvent(event)

    def browse(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open image", self.start_dir, IMAGE_FILE_FILTER)
        if path:
            self.fileSelected.emit(path)
