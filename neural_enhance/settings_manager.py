from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .logger import get_logger
from .models import EditMode, QualityTier

_logger = get_logger("settings")

DEFAULT_MODEL = "gemini-2.5-flash-image"
_DIR_KEYS = ("last_open_dir", "export_dir")


def _as_directory(value: str) -> str:
    """Absolute directory for ``value``; an existing file is replaced by its parent."""
    p = Path(value).expanduser().resolve(strict=False)
    if p.is_file():
        p = p.parent
    return str(p)


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "mode": EditMode.ENHANCE.value,
        "quality": QualityTier.T16K.value,
        "model": DEFAULT_MODEL,
        "request_timeout": 0,
        "theme": "dark",
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        if key in _DIR_KEYS and value:
            value = _as_directory(value)
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def mode(self) -> EditMode:
        try:
            return EditMode(self.get("mode"))
        except ValueError:
            _logger.warning("saved mode invalid: %s", self.get("mode"))
            return EditMode(self.DEFAULTS["mode"])

    @property
    def quality(self) -> QualityTier:
        try:
            return QualityTier(self.get("quality"))
        except ValueError:
            _logger.warning("saved quality invalid: %s", self.get("quality"))
            return QualityTier(self.DEFAULTS["quality"])

    @property
    def model(self) -> str:
        env_model = (os.getenv("NEURAL_ENHANCE_MODEL") or "").strip()
        if env_model:
            return env_model
        val = self.get("model")
        return val if isinstance(val, str) and val.strip() else DEFAULT_MODEL

    @property
    def request_timeout(self) -> float | None:
        """Seconds to wait for the model; None waits indefinitely."""
        try:
            val = float(self.get("request_timeout") or 0)
        except (TypeError, ValueError):
            return None
        return val if val > 0 else None

    @property
    def last_open_dir(self) -> str | None:
        val = self.get("last_open_dir")
        return val if isinstance(val, str) and os.path.isdir(val) else None

    @property
    def export_dir(self) -> str | None:
        val = self.get("export_dir")
        return val if isinstance(val, str) and os.path.isdir(val) else None
