"""Edit session state machine.

IDLE -> PROCESSING -> SUCCESS | ERROR, with dismiss (ERROR -> IDLE) and reset
(any -> IDLE, image cleared). At most one edit is in flight per session: each
``begin()`` issues a ticket and only the current ticket may resolve it.

Keep this module free of Qt dependencies.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .errors import EditTimeout, InvalidFileType, failure_message
from .file_operations import read_image_file
from .logger import get_logger
from .models import EditSettings, ImagePayload, ImageState, SessionStatus
from .prompt_builder import build_instruction

_logger = get_logger("session")


class EditClient(Protocol):
    async def edit(self, image: ImagePayload, instruction: str) -> ImagePayload: ...


@dataclass(frozen=True)
class EditRequest:
    ticket: int
    image: ImagePayload
    instruction: str


async def perform_edit(client: EditClient, request: EditRequest, timeout: float | None = None) -> ImagePayload:
    """Run the remote call for ``request``; the only suspension point of an edit."""
    call = client.edit(request.image, request.instruction)
    if not timeout:
        return await call
    try:
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError as e:
        raise EditTimeout(timeout) from e


@dataclass
class EditSession:
    image: ImageState = field(default_factory=ImageState)
    settings: EditSettings = field(default_factory=EditSettings)
    status: SessionStatus = SessionStatus.IDLE
    error_message: str = ""
    image_revision: int = field(default=0, init=False)
    _ticket: int = field(default=0, init=False, repr=False)
    _in_flight: int | None = field(default=None, init=False, repr=False)

    # ---- derived UI rules ----
    @property
    def is_processing(self) -> bool:
        return self.status is SessionStatus.PROCESSING

    @property
    def can_start(self) -> bool:
        return self.image.has_original and self.status not in (SessionStatus.PROCESSING, SessionStatus.SUCCESS)

    @property
    def can_download(self) -> bool:
        return self.status is SessionStatus.SUCCESS and self.image.has_result

    # ---- ingestion ----
    def load_image(self, payload: ImagePayload) -> None:
        """Replace the original, drop any result and void an in-flight edit."""
        self.image.original = payload.data
        self.image.original_mime_type = payload.mime_type
        self.image.original_name = payload.name
        self.image.result = None
        self.image.result_mime_type = ""
        self._in_flight = None
        self.image_revision += 1
        self._set_status(SessionStatus.IDLE)

    async def ingest(self, path: str | Path) -> bool:
        """Load an image file; non-image files are ignored. Returns True if loaded."""
        try:
            payload = await read_image_file(path)
        except InvalidFileType as e:
            _logger.debug("ignored non-image file %s (%s)", path, e.mime_type)
            return False
        self.load_image(payload)
        return True

    # ---- edit lifecycle ----
    def begin(self) -> EditRequest | None:
        """Enter PROCESSING. Returns None (no state change) when starting is not allowed."""
        original = self.image.original_payload()
        if original is None:
            _logger.debug("start ignored: no image loaded")
            return None
        if self._in_flight is not None:
            _logger.debug("start ignored: edit %d still in flight", self._in_flight)
            return None

        self._ticket += 1
        self._in_flight = self._ticket
        instruction = build_instruction(self.settings.mode, self.settings.quality, self.settings.instruction)
        self._set_status(SessionStatus.PROCESSING)
        _logger.info("edit %d started: mode=%s quality=%s", self._ticket, self.settings.mode.value, self.settings.quality.value)
        return EditRequest(ticket=self._ticket, image=original, instruction=instruction)

    def _resolve(self, ticket: int) -> bool:
        if ticket != self._in_flight:
            _logger.debug("stale edit %d ignored", ticket)
            return False
        self._in_flight = None
        return True

    def complete(self, ticket: int, result: ImagePayload) -> bool:
        if not self._resolve(ticket):
            return False
        self.image.result = result.data
        self.image.result_mime_type = result.mime_type
        self.image_revision += 1
        self._set_status(SessionStatus.SUCCESS)
        _logger.info("edit %d succeeded (%d bytes)", ticket, len(result.data))
        return True

    def fail(self, ticket: int, message: str) -> bool:
        if not self._resolve(ticket):
            return False
        self._set_status(SessionStatus.ERROR, message)
        _logger.info("edit %d failed: %s", ticket, message)
        return True

    def cancel(self, ticket: int) -> bool:
        if not self._resolve(ticket):
            return False
        self._set_status(SessionStatus.IDLE)
        _logger.info("edit %d canceled", ticket)
        return True

    async def start(self, client: EditClient, timeout: float | None = None) -> SessionStatus:
        """Run one edit to completion on the current event loop."""
        request = self.begin()
        if request is None:
            return self.status
        try:
            result = await perform_edit(client, request, timeout)
        except asyncio.CancelledError:
            self.cancel(request.ticket)
            raise
        except Exception as e:
            self.fail(request.ticket, failure_message(e))
        else:
            self.complete(request.ticket, result)
        return self.status

    # ---- user actions ----
    def dismiss_error(self) -> None:
        if self.status is SessionStatus.ERROR:
            self._set_status(SessionStatus.IDLE)

    def reset(self) -> None:
        self.image.clear()
        self._in_flight = None
        self.image_revision += 1
        self._set_status(SessionStatus.IDLE)

    def _set_status(self, status: SessionStatus, message: str = "") -> None:
        self.status = status
        self.error_message = message
