from __future__ import annotations

from conftest import PNG_1PX

from neural_enhance.app.state.session_state import SessionState
from neural_enhance.app.state.settings_state import SettingsState
from neural_enhance.models import DisplayMode, EditMode, EditSettings, ImagePayload, QualityTier
from neural_enhance.session import EditSession


def test_settings_state_emits_only_on_change():
    settings = EditSettings()
    state = SettingsState(settings)
    seen: list[tuple[str, str]] = []
    state.modeChanged.connect(lambda v: seen.append(("mode", v)))
    state.qualityChanged.connect(lambda v: seen.append(("quality", v)))
    state.instructionChanged.connect(lambda v: seen.append(("instruction", v)))

    state.set_mode(EditMode.ENHANCE)  # unchanged
    state.set_mode("REMOVE_BG")
    state.set_quality(QualityTier.T16K)  # unchanged
    state.set_quality("2K")
    state.set_instruction("crisp")
    state.set_instruction("crisp")

    assert seen == [("mode", "REMOVE_BG"), ("quality", "2K"), ("instruction", "crisp")]
    assert settings.mode is EditMode.REMOVE_BACKGROUND
    assert settings.quality is QualityTier.T2K
    assert settings.instruction == "crisp"
    assert state.mode == "REMOVE_BG"


def test_session_state_sync_emits_diffs():
    session = EditSession()
    state = SessionState(session)
    statuses: list[str] = []
    images: list[int] = []
    errors: list[str] = []
    state.statusChanged.connect(statuses.append)
    state.imageChanged.connect(lambda: images.append(1))
    state.errorMessageChanged.connect(errors.append)

    state.sync()
    assert (statuses, images, errors) == ([], [], [])

    session.load_image(ImagePayload(PNG_1PX, "image/png"))
    state.sync()
    assert images == [1]
    assert statuses == []  # still idle

    request = session.begin()
    state.sync()
    assert statuses == ["processing"]

    session.fail(request.ticket, "nope")
    state.sync()
    assert statuses == ["processing", "error"]
    assert errors == ["nope"]
    assert state.errorMessage == "nope"

    session.dismiss_error()
    state.sync()
    assert statuses[-1] == "idle"
    assert errors[-1] == ""
    assert images == [1]


def test_session_state_display_mode():
    state = SessionState(EditSession())
    seen: list[str] = []
    state.displayModeChanged.connect(seen.append)

    assert state.display_mode is DisplayMode.RESULT
    state.set_display_mode("split")
    state.set_display_mode(DisplayMode.SIDE_BY_SIDE)
    assert seen == ["split"]
    assert state.display_mode is DisplayMode.SIDE_BY_SIDE
