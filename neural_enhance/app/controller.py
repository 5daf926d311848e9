"""Drives an EditSession from the GUI thread.

Each edit runs on its own EditWorker thread with a private asyncio loop; the
worker only reports back through signals, so the session is never touched off
the GUI thread.
"""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

from PySide6.QtCore import QObject, QThread, Signal, Slot

from neural_enhance.app.state.session_state import SessionState
from neural_enhance.app.state.settings_state import SettingsState
from neural_enhance.errors import InvalidFileType, failure_message
from neural_enhance.file_operations import export_result, read_image_file
from neural_enhance.logger import get_logger
from neural_enhance.models import ImagePayload
from neural_enhance.session import EditClient, EditRequest, EditSession, perform_edit

_logger = get_logger("controller")


class EditWorker(QThread):
    """Worker thread that awaits one remote edit."""

    succeeded = Signal(int, object)  # ticket, ImagePayload
    failed = Signal(int, str)  # ticket, message
    canceled = Signal(int)  # ticket

    def __init__(self, client: EditClient, request: EditRequest, timeout: float | None = None):
        super().__init__()
        self.client = client
        self.request = request
        self.timeout = timeout
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task | None = None
        self._cancel_requested = False

    def run(self) -> None:
        ticket = self.request.ticket
        loop = asyncio.new_event_loop()
        self._loop = loop
        try:
            self._task = loop.create_task(perform_edit(self.client, self.request, self.timeout))
            if self._cancel_requested:
                self._task.cancel()
            result = loop.run_until_complete(self._task)
        except asyncio.CancelledError:
            self.canceled.emit(ticket)
        except Exception as ex:
            _logger.debug("edit %d raised %s", ticket, type(ex).__name__)
            self.failed.emit(ticket, failure_message(ex))
        else:
            self.succeeded.emit(ticket, result)
        finally:
            self._loop = None
            loop.close()

    def cancel(self) -> None:
        self._cancel_requested = True
        loop, task = self._loop, self._task
        if loop is None or task is None:
            return
        # The loop may close between the check and the call.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(task.cancel)


class EditController(QObject):
    """Command surface for the window: ingest, start, cancel, dismiss, reset, export."""

    busyChanged = Signal(bool)

    def __init__(
        self,
        client: EditClient,
        session: EditSession | None = None,
        *,
        timeout: float | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self.client = client
        self.timeout = timeout
        self.session = session or EditSession()
        self.session_state = SessionState(self.session, self)
        self.settings_state = SettingsState(self.session.settings, self)
        self._worker: EditWorker | None = None
        self._retired: set[EditWorker] = set()

    # ---- ingestion ----
    def load_image(self, payload: ImagePayload) -> None:
        self._release_worker()
        self.session.load_image(payload)
        self.session_state.sync()

    def open_path(self, path: str | Path) -> bool:
        """Load an image file from the GUI thread.

        Non-image files are ignored and leave a running edit alone; the edit is
        only voided once a new image has actually been read.
        """
        try:
            payload = asyncio.run(read_image_file(path))
        except InvalidFileType as e:
            _logger.debug("ignored non-image file %s (%s)", path, e.mime_type)
            return False
        self.load_image(payload)
        return True

    # ---- edit lifecycle ----
    def start(self) -> bool:
        request = self.session.begin()
        if request is None:
            return False
        self.session_state.sync()

        worker = EditWorker(self.client, request, self.timeout)
        worker.succeeded.connect(self._on_succeeded)
        worker.failed.connect(self._on_failed)
        worker.canceled.connect(self._on_canceled)
        worker.finished.connect(self._on_worker_finished)
        self._worker = worker
        worker.start()
        self.busyChanged.emit(True)
        return True

    def cancel(self) -> None:
        """Cancel the in-flight edit; the session returns to IDLE."""
        if self._worker is not None and self._worker.isRunning():
            self._worker.cancel()

    def dismiss_error(self) -> None:
        self.session.dismiss_error()
        self.session_state.sync()

    def reset(self) -> None:
        self._release_worker()
        self.session.reset()
        self.session_state.sync()

    def export(self, directory: str | Path) -> Path:
        return export_result(self.session.image, directory)

    @property
    def is_busy(self) -> bool:
        return self._worker is not None

    # ---- worker callbacks (queued onto the GUI thread) ----
    @Slot(int, object)
    def _on_succeeded(self, ticket: int, result: ImagePayload) -> None:
        self.session.complete(ticket, result)
        self.session_state.sync()

    @Slot(int, str)
    def _on_failed(self, ticket: int, message: str) -> None:
        self.session.fail(ticket, message)
        self.session_state.sync()

    @Slot(int)
    def _on_canceled(self, ticket: int) -> None:
        self.session.cancel(ticket)
        self.session_state.sync()

    def _release_worker(self) -> None:
        """Detach from the current worker; only its ``finished`` signal stays connected."""
        worker = self._worker
        if worker is None:
            return
        worker.succeeded.disconnect(self._on_succeeded)
        worker.failed.disconnect(self._on_failed)
        worker.canceled.disconnect(self._on_canceled)
        worker.cancel()
        self._retired.add(worker)
        self._worker = None
        self.busyChanged.emit(False)

    @Slot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if not isinstance(worker, EditWorker):
            return
        self._retired.discard(worker)
        if self._worker is worker:
            self._worker = None
            self.busyChanged.emit(False)
        worker.deleteLater()

    def shutdown(self, wait_ms: int = 1000) -> None:
        for worker in [self._worker, *self._retired]:
            if worker is not None and worker.isRunning():
                worker.cancel()
                worker.wait(wait_ms)
