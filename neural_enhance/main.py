import argparse
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths, Qt
from PySide6.QtGui import QAction, QCloseEvent, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from neural_enhance.app.controller import EditController
from neural_enhance.credentials import KeyringCredentialBroker
from neural_enhance.decoder import image_dimensions
from neural_enhance.edit_client import GeminiEditClient
from neural_enhance.logger import get_logger
from neural_enhance.models import ImageState, SessionStatus
from neural_enhance.session import EditSession
from neural_enhance.settings_manager import SettingsManager
from neural_enhance.styles import apply_theme
from neural_enhance.ui_comparison import ComparisonView
from neural_enhance.ui_key_prompt import KeyPromptBridge
from neural_enhance.ui_sidebar import Sidebar
from neural_enhance.ui_uploader import DropZone
from neural_enhance.viewer import processing_caption, start_label

# --- CLI logging options -----------------------------------------------------
# To prevent Qt from exiting due to unknown options, we preemptively parse
# our own options, reflect them in environment variables (NEURAL_ENHANCE_LOG_LEVEL,
# NEURAL_ENHANCE_LOG_CATS), and remove them from sys.argv.


def _apply_cli_logging_options() -> None:
    parser = argparse.ArgumentParser(description="NeuralEnhance", add_help=False)
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    args, remaining = parser.parse_known_args()
    if args.log_level:
        os.environ["NEURAL_ENHANCE_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["NEURAL_ENHANCE_LOG_CATS"] = args.log_cats
    sys.argv[:] = [sys.argv[0], *remaining]


_apply_cli_logging_options()
logger = get_logger("main")
_BASE_DIR = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent))

_VIEW_UPLOAD = 0
_VIEW_PROCESSING = 1
_VIEW_IMAGE = 2


def default_settings_path() -> str:
    app_cfg = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppConfigLocation)
    if app_cfg:
        return (Path(app_cfg) / "neural_enhance" / "settings.json").as_posix()
    return (_BASE_DIR / "settings.json").as_posix()


class ErrorBanner(QFrame):
    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("ErrorBanner")
        self.message_label = QLabel()
        self.message_label.setWordWrap(True)
        self.dismiss_btn = QPushButton("Dismiss")
        self.dismiss_btn.setObjectName("GhostButton")
        layout = QHBoxLayout(self)
        layout.addWidget(self.message_label, 1)
        layout.addWidget(self.dismiss_btn)
        self.hide()


class ProcessingPanel(QFrame):
    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("ProcessingPanel")
        self.title_label = QLabel("Enhancing Image...")
        self.title_label.setObjectName("AppTitle")
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.caption_label = QLabel()
        self.caption_label.setObjectName("FooterNote")
        self.caption_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout = QVBoxLayout(self)
        layout.addStretch()
        layout.addWidget(self.title_label)
        layout.addWidget(self.caption_label)
        layout.addStretch()


class MainWindow(QMainWindow):
    def __init__(
        self,
        settings: SettingsManager | None = None,
        controller: EditController | None = None,
    ):
        super().__init__()
        self.setWindowTitle("NeuralEnhance")
        self.resize(1280, 820)

        self._settings_path = settings.settings_path if settings else default_settings_path()
        self._settings_manager = settings or SettingsManager(self._settings_path)

        self._key_prompt = KeyPromptBridge(self)
        self._broker = KeyringCredentialBroker(self._key_prompt)
        if controller is None:
            session = EditSession()
            session.settings.mode = self._settings_manager.mode
            session.settings.quality = self._settings_manager.quality
            client = GeminiEditClient(self._broker, model=self._settings_manager.model)
            controller = EditController(client, session, timeout=self._settings_manager.request_timeout, parent=self)
        self.controller = controller

        self._build_ui()
        self._build_menus()
        self._connect_state()
        self._refresh()

    # ---- construction ----
    def _build_ui(self) -> None:
        self.sidebar = Sidebar(self.controller.settings_state, self._settings_manager.model)

        self.banner = ErrorBanner()
        self.banner.dismiss_btn.clicked.connect(self.controller.dismiss_error)

        self.new_btn = QPushButton("New Image")
        self.new_btn.setObjectName("GhostButton")
        self.new_btn.clicked.connect(self.controller.reset)
        self.start_btn = QPushButton()
        self.start_btn.setObjectName("PrimaryButton")
        self.start_btn.clicked.connect(self.start_edit)
        self.download_btn = QPushButton("Download Result")
        self.download_btn.setObjectName("PrimaryButton")
        self.download_btn.clicked.connect(self.download_result)
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setObjectName("GhostButton")
        self.cancel_btn.clicked.connect(self.controller.cancel)

        self.action_bar = QWidget()
        bar = QHBoxLayout(self.action_bar)
        bar.setContentsMargins(0, 0, 0, 0)
        bar.addWidget(self.new_btn)
        bar.addStretch()
        bar.addWidget(self.cancel_btn)
        bar.addWidget(self.start_btn)
        bar.addWidget(self.download_btn)

        self.drop_zone = DropZone(start_dir=self._settings_manager.last_open_dir or "")
        self.drop_zone.fileSelected.connect(self.open_image)
        self.processing_panel = ProcessingPanel()
        self.comparison = ComparisonView()
        self.comparison.displayModeRequested.connect(self.controller.session_state.set_display_mode)

        self.viewport = QStackedWidget()
        self.viewport.insertWidget(_VIEW_UPLOAD, self.drop_zone)
        self.viewport.insertWidget(_VIEW_PROCESSING, self.processing_panel)
        self.viewport.insertWidget(_VIEW_IMAGE, self.comparison)

        main_area = QWidget()
        main_layout = QVBoxLayout(main_area)
        main_layout.setContentsMargins(48, 32, 48, 32)
        main_layout.addWidget(self.banner)
        main_layout.addWidget(self.action_bar)
        main_layout.addWidget(self.viewport, 1)

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self.sidebar)
        layout.addWidget(main_area, 1)
        self.setCentralWidget(central)

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        self.open_action = QAction("&Open Image...", self)
        self.open_action.setShortcut(QKeySequence.StandardKey.Open)
        self.open_action.triggered.connect(self.choose_image)
        self.export_action = QAction("&Download Result...", self)
        self.export_action.setShortcut(QKeySequence.StandardKey.Save)
        self.export_action.triggered.connect(self.download_result)
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(self.open_action)
        file_menu.addAction(self.export_action)
        file_menu.addSeparator()
        file_menu.addAction(quit_action)

        edit_menu = self.menuBar().addMenu("&Edit")
        self.cancel_action = QAction("&Cancel Edit", self)
        self.cancel_action.setShortcut(QKeySequence(Qt.Key.Key_Escape))
        self.cancel_action.triggered.connect(self.controller.cancel)
        edit_menu.addAction(self.cancel_action)

        key_menu = self.menuBar().addMenu("&API Key")
        change_key = QAction("&Change API Key...", self)
        change_key.triggered.connect(self.change_api_key)
        forget_key = QAction("&Forget Stored Key", self)
        forget_key.triggered.connect(self.forget_api_key)
        key_menu.addAction(change_key)
        key_menu.addAction(forget_key)

        theme_menu = self.menuBar().addMenu("&View")
        for theme in ("dark", "light"):
            action = QAction(theme.capitalize(), self)
            action.triggered.connect(lambda _checked=False, t=theme: self.apply_theme(t))
            theme_menu.addAction(action)

    def _connect_state(self) -> None:
        ss = self.controller.session_state
        ss.statusChanged.connect(lambda _s: self._refresh())
        ss.errorMessageChanged.connect(lambda _m: self._refresh())
        ss.imageChanged.connect(self._on_image_changed)
        ss.displayModeChanged.connect(self.comparison.set_display_mode)
        self.comparison.set_display_mode(ss.display_mode)

        self.controller.busyChanged.connect(self._on_busy_changed)
        self._on_busy_changed(self.controller.is_busy)

        st = self.controller.settings_state
        st.modeChanged.connect(self._on_mode_changed)
        st.qualityChanged.connect(self._on_quality_changed)

    # ---- state -> widgets ----
    def _on_image_changed(self) -> None:
        image = self.controller.session.image
        self.comparison.set_image(image)
        if image.original is not None and image.result is None:
            self.statusBar().showMessage(self._describe_original(image), 5000)
        self._refresh()

    @staticmethod
    def _describe_original(image: ImageState) -> str:
        name = image.original_name or "image"
        size = image_dimensions(image.original) if image.original is not None else None
        if size is None:
            return f"Loaded {name}"
        return f"Loaded {name} ({size[0]} x {size[1]})"

    def _on_busy_changed(self, busy: bool) -> None:
        # Cancel is enabled only while a worker is attached.
        self.cancel_btn.setEnabled(busy)
        self.cancel_action.setEnabled(busy)

    def _on_mode_changed(self, mode: str) -> None:
        self._settings_manager.set("mode", mode)
        self._refresh()

    def _on_quality_changed(self, quality: str) -> None:
        self._settings_manager.set("quality", quality)
        self._refresh()

    def _refresh(self) -> None:
        session = self.controller.session
        status = session.status
        has_image = session.image.has_original

        self.banner.setVisible(status is SessionStatus.ERROR)
        self.banner.message_label.setText(session.error_message)

        self.action_bar.setVisible(has_image)
        self.start_btn.setText(start_label(session.settings.mode))
        self.start_btn.setVisible(session.can_start)
        self.download_btn.setVisible(session.can_download)
        self.export_action.setEnabled(session.can_download)
        self.cancel_btn.setVisible(session.is_processing)

        if not has_image:
            self.viewport.setCurrentIndex(_VIEW_UPLOAD)
        elif status is SessionStatus.PROCESSING:
            self.processing_panel.caption_label.setText(processing_caption(session.settings))
            self.viewport.setCurrentIndex(_VIEW_PROCESSING)
        else:
            self.viewport.setCurrentIndex(_VIEW_IMAGE)

    # ---- commands ----
    def choose_image(self) -> None:
        self.drop_zone.start_dir = self._settings_manager.last_open_dir or ""
        self.drop_zone.browse()

    def open_image(self, path: str) -> None:
        try:
            loaded = self.controller.open_path(path)
        except OSError as e:
            logger.error("failed to read %s: %s", path, e)
            QMessageBox.warning(self, "Open image", f"Could not read {os.path.basename(path)}:\n{e}")
            return
        if loaded:
            self._settings_manager.set("last_open_dir", path)
        else:
            logger.debug("not an image, ignored: %s", path)

    def start_edit(self) -> None:
        self.controller.start()

    def download_result(self) -> None:
        if not self.controller.session.can_download:
            return
        start_dir = self._settings_manager.export_dir or self._settings_manager.last_open_dir or ""
        directory = QFileDialog.getExistingDirectory(self, "Save result to", start_dir)
        if not directory:
            return
        try:
            target = self.controller.export(directory)
        except Exception as e:
            logger.error("export failed: %s", e)
            QMessageBox.warning(self, "Download result", f"Could not save the result:\n{e}")
            return
        self._settings_manager.set("export_dir", directory)
        self.statusBar().showMessage(f"Saved {target.name}", 5000)

    def change_api_key(self) -> None:
        key = self._key_prompt()
        if not key:
            return
        self._broker.store(key)
        self.statusBar().showMessage("API key updated", 5000)

    def forget_api_key(self) -> None:
        self._broker.forget()
        self.statusBar().showMessage("Stored API key removed", 5000)

    def apply_theme(self, theme: str) -> None:
        app = QApplication.instance()
        if app is None:
            return
        apply_theme(app, theme)
        self._settings_manager.set("theme", theme)
        logger.debug("theme applied: %s", theme)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.controller.shutdown()
        super().closeEvent(event)


def run(argv: list[str] | None = None) -> int:
    """Application entrypoint (packaging-friendly)."""
    if argv is None:
        argv = sys.argv

    # Optional start image, after logging options were stripped by _apply_cli_logging_options().
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("start_path", nargs="?", help="Image file to open")
    args, _ = parser.parse_known_args(argv[1:])
    start_path = Path(args.start_path) if args.start_path else None

    app = QApplication(argv)
    app.setApplicationName("NeuralEnhance")
    window = MainWindow()

    # Apply theme from settings (default: dark)
    apply_theme(app, window._settings_manager.get("theme", "dark"))

    if start_path and start_path.is_file():
        window.open_image(str(start_path))

    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
