from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal

from neural_enhance.models import DisplayMode
from neural_enhance.session import EditSession


class SessionState(QObject):
    """Bindable mirror of an EditSession (read-only; mutate via the controller)."""

    statusChanged = Signal(str)
    errorMessageChanged = Signal(str)
    imageChanged = Signal()
    displayModeChanged = Signal(str)

    def __init__(self, session: EditSession, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._session = session
        self._status = session.status
        self._error_message = session.error_message
        self._image_revision = session.image_revision
        self._display_mode = DisplayMode.RESULT

    @property
    def session(self) -> EditSession:
        return self._session

    def _get_status(self) -> str:
        return self._status.value

    status = Property(str, _get_status, notify=statusChanged)  # type: ignore[arg-type]

    def _get_error_message(self) -> str:
        return str(self._error_message)

    errorMessage = Property(str, _get_error_message, notify=errorMessageChanged)  # type: ignore[arg-type]

    @property
    def display_mode(self) -> DisplayMode:
        return self._display_mode

    # ---- internal mutation helpers (called by controller) ----
    def sync(self) -> None:
        """Emit change signals for whatever moved in the session since the last sync."""
        s = self._session
        if s.status is not self._status:
            self._status = s.status
            self.statusChanged.emit(s.status.value)
        if s.error_message != self._error_message:
            self._error_message = s.error_message
            self.errorMessageChanged.emit(s.error_message)
        if s.image_revision != self._image_revision:
            self._image_revision = s.image_revision
            self.imageChanged.emit()

    def set_display_mode(self, mode: DisplayMode | str) -> None:
        m = DisplayMode(mode)
        if m is self._display_mode:
            return
        self._display_mode = m
        self.displayModeChanged.emit(m.value)
