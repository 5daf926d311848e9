from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QButtonGroup,
    QFrame,
    QGridLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from .app.state.settings_state import SettingsState
from .models import EditMode, QualityTier
from .viewer import instruction_placeholder

_MODE_BUTTONS = ((EditMode.ENHANCE, "Upscale"), (EditMode.REMOVE_BACKGROUND, "Remove BG"))


def _section_label(text: str) -> QLabel:
    label = QLabel(text.upper())
    label.setObjectName("SectionLabel")
    return label


class Sidebar(QFrame):
    """Operation mode, target resolution and custom instruction controls."""

    def __init__(self, state: SettingsState, model_name: str, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("Sidebar")
        self.setFixedWidth(320)
        self._state = state

        title = QLabel("NeuralEnhance")
        title.setObjectName("AppTitle")

        # Mode toggle
        self.mode_group = QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_buttons: dict[EditMode, QPushButton] = {}
        mode_grid = QGridLayout()
        for col, (mode, text) in enumerate(_MODE_BUTTONS):
            btn = QPushButton(text)
            btn.setObjectName("ModeButton")
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, m=mode: self._state.set_mode(m))
            self.mode_group.addButton(btn)
            self.mode_buttons[mode] = btn
            mode_grid.addWidget(btn, 0, col)

        # Resolution list
        self.tier_group = QButtonGroup(self)
        self.tier_group.setExclusive(True)
        self.tier_buttons: dict[QualityTier, QPushButton] = {}
        tier_layout = QVBoxLayout()
        tier_layout.setSpacing(6)
        for tier in QualityTier:
            btn = QPushButton(tier.label)
            btn.setObjectName("TierButton")
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, t=tier: self._state.set_quality(t))
            self.tier_group.addButton(btn)
            self.tier_buttons[tier] = btn
            tier_layout.addWidget(btn)

        # Custom instruction
        self.instruction_edit = QPlainTextEdit()
        self.instruction_edit.setFixedHeight(96)
        self.instruction_edit.setPlainText(state.instruction)
        self.instruction_edit.textChanged.connect(
            lambda: self._state.set_instruction(self.instruction_edit.toPlainText())
        )

        footer = QLabel(f"Powered by {model_name}.")
        footer.setObjectName("FooterNote")
        footer.setAlignment(Qt.AlignmentFlag.AlignCenter)
        footer.setWordWrap(True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)
        layout.addWidget(title)
        layout.addSpacing(16)
        layout.addWidget(_section_label("Operation Mode"))
        layout.addLayout(mode_grid)
        layout.addSpacing(16)
        layout.addWidget(_section_label("Target Resolution"))
        layout.addLayout(tier_layout)
        layout.addSpacing(16)
        layout.addWidget(_section_label("Custom Instruction (Optional)"))
        layout.addWidget(self.instruction_edit)
        layout.addStretch()
        layout.addWidget(footer)

        state.modeChanged.connect(lambda _m: self._sync())
        state.qualityChanged.connect(lambda _q: self._sync())
        self._sync()

    def _sync(self) -> None:
        mode = EditMode(self._state.mode)
        self.mode_buttons[mode].setChecked(True)
        self.tier_buttons[QualityTier(self._state.quality)].setChecked(True)
        self.instruction_edit.setPlaceholderText(instruction_placeholder(mode))
