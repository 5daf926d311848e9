from __future__ import annotations

import json
from pathlib import Path

from neural_enhance.models import EditMode, QualityTier
from neural_enhance.settings_manager import DEFAULT_MODEL, SettingsManager


def test_defaults_when_file_missing(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("NEURAL_ENHANCE_MODEL", raising=False)
    sm = SettingsManager(str(tmp_path / "settings.json"))
    assert sm.mode is EditMode.ENHANCE
    assert sm.quality is QualityTier.T16K
    assert sm.model == DEFAULT_MODEL
    assert sm.request_timeout is None
    assert sm.get("theme") == "dark"
    assert sm.last_open_dir is None


def test_set_persists_to_json(tmp_path: Path) -> None:
    settings_path = tmp_path / "cfg" / "settings.json"
    sm = SettingsManager(str(settings_path))
    sm.set("mode", EditMode.REMOVE_BACKGROUND.value)
    sm.set("quality", "4K")

    data = json.loads(settings_path.read_text(encoding="utf-8"))
    assert data == {"mode": "REMOVE_BG", "quality": "4K"}

    again = SettingsManager(str(settings_path))
    assert again.mode is EditMode.REMOVE_BACKGROUND
    assert again.quality is QualityTier.T4K


def test_invalid_saved_values_fall_back(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"mode": "SHARPEN", "quality": "32K", "request_timeout": "soon"}), "utf-8")
    sm = SettingsManager(str(settings_path))
    assert sm.mode is EditMode.ENHANCE
    assert sm.quality is QualityTier.T16K
    assert sm.request_timeout is None


def test_corrupt_file_is_ignored(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{not json", "utf-8")
    sm = SettingsManager(str(settings_path))
    assert sm.data == {}


def test_request_timeout_positive_only(tmp_path: Path) -> None:
    sm = SettingsManager(str(tmp_path / "settings.json"))
    sm.set("request_timeout", 90)
    assert sm.request_timeout == 90.0
    sm.set("request_timeout", -1)
    assert sm.request_timeout is None


def test_model_env_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("NEURAL_ENHANCE_MODEL", raising=False)
    sm = SettingsManager(str(tmp_path / "settings.json"))
    sm.set("model", "custom-model")
    assert sm.model == "custom-model"
    monkeypatch.setenv("NEURAL_ENHANCE_MODEL", "env-model")
    assert sm.model == "env-model"


def test_last_open_dir_is_normalized_and_directory(tmp_path: Path) -> None:
    sm = SettingsManager(str(tmp_path / "settings.json"))

    folder = tmp_path / "some_folder"
    folder.mkdir()

    sm.set("last_open_dir", str(folder))

    assert sm.last_open_dir is not None
    assert Path(sm.last_open_dir) == folder.resolve()


def test_setting_export_dir_to_file_coerces_to_parent_dir(tmp_path: Path) -> None:
    sm = SettingsManager(str(tmp_path / "settings.json"))

    folder = tmp_path / "exports"
    folder.mkdir()
    file_path = folder / "enhanced-1.png"
    file_path.write_bytes(b"x")

    sm.set("export_dir", str(file_path))

    assert sm.export_dir == str(folder.resolve())
