"""Single-shot image edit against the Gemini image model."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .credentials import CredentialBroker
from .errors import CredentialMissing, CredentialRefreshed, NoImageReturned
from .file_operations import PNG_MIME_TYPE
from .logger import get_logger
from .models import ImagePayload
from .settings_manager import DEFAULT_MODEL

_logger = get_logger("edit_client")

ASPECT_RATIO = "1:1"
_ENTITY_NOT_FOUND = "Requested entity was not found"
_HTTP_NOT_FOUND = 404

ClientFactory = Callable[[str], Any]


def _default_client_factory(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def is_entity_not_found(exc: BaseException) -> bool:
    if _ENTITY_NOT_FOUND in str(exc):
        return True
    return isinstance(exc, genai_errors.APIError) and exc.code == _HTTP_NOT_FOUND


def first_inline_image(response: Any) -> ImagePayload | None:
    """Return the first response part that carries inline image bytes."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            blob = getattr(part, "inline_data", None)
            if blob is not None and blob.data:
                return ImagePayload(data=bytes(blob.data), mime_type=blob.mime_type or PNG_MIME_TYPE)
        # Only the first candidate is considered.
        break
    return None


class GeminiEditClient:
    """Send one image plus an instruction to the model and return the edit.

    No retries, no backoff: a failed call is reported to the caller and the
    user decides whether to start again.
    """

    def __init__(
        self,
        broker: CredentialBroker,
        *,
        model: str = DEFAULT_MODEL,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.broker = broker
        self.model = model
        self._client_factory = client_factory or _default_client_factory

    async def ensure_credential(self) -> str:
        if not await self.broker.is_credential_selected():
            await self.broker.request_credential_selection()
        key = self.broker.current_credential()
        if not key:
            raise CredentialMissing()
        return key

    async def edit(self, image: ImagePayload, instruction: str) -> ImagePayload:
        api_key = await self.ensure_credential()
        client = self._client_factory(api_key)

        _logger.debug("generate_content: model=%s mime=%s bytes=%d", self.model, image.mime_type, len(image.data))
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                    types.Part.from_text(text=instruction),
                ],
                config=types.GenerateContentConfig(
                    image_config=types.ImageConfig(aspect_ratio=ASPECT_RATIO),
                ),
            )
        except Exception as e:
            _logger.error("Gemini API error: %s", e)
            if is_entity_not_found(e):
                await self.broker.request_credential_selection()
                raise CredentialRefreshed() from e
            raise

        result = first_inline_image(response)
        if result is None:
            raise NoImageReturned()
        if result.mime_type != PNG_MIME_TYPE:
            _logger.debug("model returned %s instead of png", result.mime_type)
        return result
