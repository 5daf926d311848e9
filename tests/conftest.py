"""Pytest configuration.

Qt widgets are created in several test modules, so a single `QApplication`
is created for the whole session as early as possible and shut down at the
end. Tests run with the offscreen platform plugin so no window manager is
needed.

Fixtures shared across modules live here: a tiny PNG, an in-memory keyring,
and fake edit clients.
"""

from __future__ import annotations

import asyncio
import base64
import os
from typing import Any

import keyring
import keyring.backend
import keyring.errors
import pytest

from neural_enhance.models import ImagePayload

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

_APP: Any | None = None

# 1x1 RGBA PNG
PNG_1PX = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="
)


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QApplication exists before collecting/running tests."""

    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    global _APP

    app = QApplication.instance()
    if app is None:
        # Keep a strong ref so it isn't GC'd mid-session.
        _APP = QApplication([])
    else:
        _APP = app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Attempt a clean Qt shutdown to avoid lingering threads at interpreter exit."""

    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    app = QApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


class MemoryKeyring(keyring.backend.KeyringBackend):
    priority = 1  # type: ignore[assignment]

    def __init__(self) -> None:
        super().__init__()
        self.passwords: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self.passwords.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.passwords[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise keyring.errors.PasswordDeleteError("not set") from None


@pytest.fixture
def memory_keyring(monkeypatch):
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    try:
        yield backend
    finally:
        keyring.set_keyring(previous)


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(PNG_1PX)
    return path


class FakeEditClient:
    """Records calls and returns a canned result or raises a canned error."""

    def __init__(self, result: ImagePayload | None = None, error: BaseException | None = None) -> None:
        self.result = result or ImagePayload(b"edited-bytes", "image/png")
        self.error = error
        self.calls: list[tuple[ImagePayload, str]] = []

    async def edit(self, image: ImagePayload, instruction: str) -> ImagePayload:
        self.calls.append((image, instruction))
        if self.error is not None:
            raise self.error
        return self.result


class SlowEditClient:
    """Never answers within a test; only cancellation ends the call."""

    def __init__(self, seconds: float = 30.0) -> None:
        self.seconds = seconds
        self.calls = 0

    async def edit(self, image: ImagePayload, instruction: str) -> ImagePayload:
        self.calls += 1
        await asyncio.sleep(self.seconds)
        raise AssertionError("slow edit was not cancelled")
