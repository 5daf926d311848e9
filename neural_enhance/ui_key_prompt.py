"""API key dialog that can be requested from any thread.

The credential broker asks for a key from inside an edit worker; dialogs must
run on the GUI thread, so the request is marshalled over a blocking queued
signal.
"""

from __future__ import annotations

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot
from PySide6.QtWidgets import QInputDialog, QLineEdit, QWidget

from .logger import get_logger

_logger = get_logger("key_prompt")

_PROMPT_TITLE = "Gemini API key"
_PROMPT_TEXT = "Paste a Gemini API key.\nIt is stored in the system keychain."


class KeyPromptBridge(QObject):
    _requested = Signal()

    def __init__(self, parent_widget: QWidget | None = None) -> None:
        super().__init__()
        self._parent_widget = parent_widget
        self._answer: str | None = None
        self._requested.connect(self._ask, Qt.ConnectionType.BlockingQueuedConnection)

    def __call__(self) -> str | None:
        self._answer = None
        if QThread.currentThread() == self.thread():
            self._ask()
        else:
            self._requested.emit()
        return self._answer

    @Slot()
    def _ask(self) -> None:
        text, ok = QInputDialog.getText(
            self._parent_widget,
            _PROMPT_TITLE,
            _PROMPT_TEXT,
            QLineEdit.EchoMode.Password,
        )
        self._answer = text.strip() if ok and text.strip() else None
        _logger.debug("key prompt answered: %s", "yes" if self._answer else "no")
