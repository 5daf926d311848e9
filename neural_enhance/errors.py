"""Failures raised by the edit pipeline.

Anything not listed here (SDK/network errors) propagates unchanged and its
message is shown to the user as-is.
"""

from __future__ import annotations

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class EditError(Exception):
    """Base class for failures whose message is meant for the user."""

    default_message = UNEXPECTED_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidFileType(EditError):
    default_message = "Only image files can be loaded."

    def __init__(self, mime_type: str | None = None, message: str | None = None) -> None:
        self.mime_type = mime_type
        super().__init__(message)


class NoImageReturned(EditError):
    default_message = "No image data returned from the model."


class CredentialRefreshed(EditError):
    default_message = "API Key session refreshed. Please click Start again."


class CredentialMissing(EditError):
    default_message = "No API key selected. Add a Gemini API key and try again."


class EditTimeout(EditError):
    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        super().__init__(f"The model did not respond within {seconds:g} seconds.")


def failure_message(exc: BaseException) -> str:
    """User-visible text for a failed edit."""
    text = str(exc).strip()
    return text or UNEXPECTED_ERROR_MESSAGE
