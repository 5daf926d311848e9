from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal

from neural_enhance.models import EditMode, EditSettings, QualityTier


class SettingsState(QObject):
    """Edit settings the sidebar binds to; wraps the session's EditSettings."""

    modeChanged = Signal(str)
    qualityChanged = Signal(str)
    instructionChanged = Signal(str)

    def __init__(self, settings: EditSettings, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._settings = settings

    def _get_mode(self) -> str:
        return self._settings.mode.value

    mode = Property(str, _get_mode, notify=modeChanged)  # type: ignore[arg-type]

    def _get_quality(self) -> str:
        return self._settings.quality.value

    quality = Property(str, _get_quality, notify=qualityChanged)  # type: ignore[arg-type]

    def _get_instruction(self) -> str:
        return self._settings.instruction

    instruction = Property(str, _get_instruction, notify=instructionChanged)  # type: ignore[arg-type]

    # ---- mutation helpers (called by widgets/controller) ----
    def set_mode(self, mode: EditMode | str) -> None:
        m = EditMode(mode)
        if m is self._settings.mode:
            return
        self._settings.mode = m
        self.modeChanged.emit(m.value)

    def set_quality(self, quality: QualityTier | str) -> None:
        q = QualityTier(quality)
        if q is self._settings.quality:
            return
        self._settings.quality = q
        self.qualityChanged.emit(q.value)

    def set_instruction(self, text: str) -> None:
        t = str(text)
        if t == self._settings.instruction:
            return
        self._settings.instruction = t
        self.instructionChanged.emit(t)
