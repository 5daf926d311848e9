from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication

# -----------------------------------------------------------------------------
# Color palette (dark studio look, indigo accent)
# -----------------------------------------------------------------------------


class StudioColors:
    # Dark Theme
    DARK_WINDOW = "#0F0F11"  # Sidebar / window background
    DARK_SURFACE = "#16161A"  # Panels
    DARK_SURFACE_ALT = "#1F2937"  # Selected toggles
    DARK_BORDER = "#1F2937"  # Divider/Border
    DARK_TEXT = "#F3F4F6"  # Primary text
    DARK_TEXT_SEC = "#9CA3AF"  # Secondary text
    DARK_ACCENT = "#6366F1"  # Indigo
    DARK_ACCENT_TEXT = "#FFFFFF"

    # Light Theme
    LIGHT_WINDOW = "#F3F3F3"
    LIGHT_SURFACE = "#FFFFFF"
    LIGHT_SURFACE_ALT = "#E5E7EB"
    LIGHT_BORDER = "#D1D5DB"
    LIGHT_TEXT = "#1F1F1F"
    LIGHT_TEXT_SEC = "#5D5D5D"
    LIGHT_ACCENT = "#4F46E5"
    LIGHT_ACCENT_TEXT = "#FFFFFF"

    ERROR_BG = "#3B1416"
    ERROR_BORDER = "#7F1D1D"
    ERROR_TEXT = "#FECACA"


# -----------------------------------------------------------------------------
# QSS template
# -----------------------------------------------------------------------------

COMMON_QSS = """
    * {
        font-size: {{font_size}}pt;
    }

    QMenuBar {
        background-color: {{window}};
        color: {{text}};
        border-bottom: 1px solid {{border}};
    }
    QMenu {
        background-color: {{surface}};
        color: {{text}};
        border: 1px solid {{border}};
        border-radius: 6px;
        padding: 6px;
    }
    QMenu::item:selected {
        background-color: {{accent}};
        color: {{accent_text}};
    }

    /* Sidebar */
    #Sidebar {
        background-color: {{window}};
        border-right: 1px solid {{border}};
    }
    #SectionLabel {
        color: {{text_sec}};
        font-size: {{small_font_size}}pt;
        font-weight: 600;
        letter-spacing: 1px;
    }
    #AppTitle {
        font-size: {{title_font_size}}pt;
        font-weight: bold;
    }
    #FooterNote {
        color: {{text_sec}};
        font-size: {{small_font_size}}pt;
    }

    /* Mode toggle + tier list */
    QPushButton#ModeButton, QPushButton#TierButton, QPushButton#ViewButton {
        background-color: transparent;
        color: {{text_sec}};
        border: 1px solid {{border}};
        border-radius: 6px;
        padding: 8px 10px;
        text-align: left;
    }
    QPushButton#ModeButton {
        text-align: center;
    }
    QPushButton#ViewButton {
        text-align: center;
        border-radius: 12px;
        padding: 4px 12px;
    }
    QPushButton#ModeButton:checked, QPushButton#ViewButton:checked {
        background-color: {{surface_alt}};
        color: {{text}};
    }
    QPushButton#TierButton:checked {
        border: 1px solid {{accent}};
        color: {{text}};
    }

    /* Primary/ghost actions */
    QPushButton#PrimaryButton {
        background-color: {{accent}};
        color: {{accent_text}};
        border: none;
        border-radius: 6px;
        padding: 8px 16px;
        font-weight: 600;
    }
    QPushButton#PrimaryButton:disabled {
        background-color: {{surface_alt}};
        color: {{text_sec}};
    }
    QPushButton#GhostButton {
        background-color: transparent;
        color: {{text_sec}};
        border: none;
        padding: 8px 12px;
    }
    QPushButton#GhostButton:hover {
        color: {{text}};
    }

    QPlainTextEdit {
        background-color: {{surface}};
        color: {{text}};
        border: 1px solid {{border}};
        border-radius: 6px;
        padding: 6px;
    }

    /* Error banner */
    #ErrorBanner {
        background-color: {{error_bg}};
        border: 1px solid {{error_border}};
        border-radius: 8px;
    }
    #ErrorBanner QLabel {
        color: {{error_text}};
    }

    /* Viewport */
    #DropZone {
        border: 2px dashed {{border}};
        border-radius: 16px;
        background-color: {{surface}};
    }
    #DropZone[dragging="true"] {
        border: 2px dashed {{accent}};
    }
    #ProcessingPanel, #ImagePane {
        background-color: {{surface}};
        border: 1px solid {{border}};
        border-radius: 16px;
    }
    #PaneLabel {
        color: {{text_sec}};
        font-size: {{small_font_size}}pt;
        letter-spacing: 1px;
    }
"""


# (palette role, palette key); disabled roles all use the secondary text color
_PALETTE_ROLES = (
    (QPalette.ColorRole.Window, "window"),
    (QPalette.ColorRole.WindowText, "text"),
    (QPalette.ColorRole.Base, "surface"),
    (QPalette.ColorRole.AlternateBase, "surface_alt"),
    (QPalette.ColorRole.Text, "text"),
    (QPalette.ColorRole.Button, "surface"),
    (QPalette.ColorRole.ButtonText, "text"),
    (QPalette.ColorRole.Highlight, "accent"),
    (QPalette.ColorRole.HighlightedText, "accent_text"),
)
_DISABLED_ROLES = (QPalette.ColorRole.Text, QPalette.ColorRole.ButtonText, QPalette.ColorRole.WindowText)


def render_qss(colors: dict[str, str], font_size: int = 10) -> str:
    """Fill the ``{{name}}`` placeholders of COMMON_QSS."""
    values = {
        **colors,
        "font_size": str(font_size),
        "small_font_size": str(max(7, font_size - 2)),
        "title_font_size": str(font_size + 5),
    }
    qss = COMMON_QSS
    for name, value in values.items():
        qss = qss.replace("{{" + name + "}}", value)
    return qss


def _apply_style(app: QApplication, colors: dict[str, str], font_size: int = 10) -> None:
    app.setStyle("Fusion")

    palette = QPalette()
    for role, key in _PALETTE_ROLES:
        palette.setColor(role, QColor(colors[key]))
    for role in _DISABLED_ROLES:
        palette.setColor(QPalette.ColorGroup.Disabled, role, QColor(colors["text_sec"]))
    app.setPalette(palette)

    font = QFont("Inter")
    font.setStyleHint(QFont.StyleHint.SansSerif)
    font.setPointSize(font_size)
    app.setFont(font)

    app.setStyleSheet(render_qss(colors, font_size))


_THEMED_KEYS = ("window", "surface", "surface_alt", "border", "text", "text_sec", "accent", "accent_text")


def palette_for(theme: str) -> dict[str, str]:
    """Color dict for "dark" or "light"; unknown themes fall back to dark."""
    prefix = "LIGHT" if theme == "light" else "DARK"
    colors = {key: getattr(StudioColors, f"{prefix}_{key.upper()}") for key in _THEMED_KEYS}
    colors.update(
        error_bg=StudioColors.ERROR_BG,
        error_border=StudioColors.ERROR_BORDER,
        error_text=StudioColors.ERROR_TEXT,
    )
    return colors


def apply_theme(app: QApplication, theme: str = "dark", font_size: int = 10) -> None:
    """Apply a theme ("dark" or "light") to the application."""
    _apply_style(app, palette_for(theme), font_size)
