"""Plain data types shared by the core and the Qt layer.

Keep this module free of Qt dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EditMode(str, Enum):
    ENHANCE = "ENHANCE"
    REMOVE_BACKGROUND = "REMOVE_BG"


class QualityTier(str, Enum):
    T1K = "1K"
    T2K = "2K"
    T4K = "4K"
    T8K = "8K"
    T16K = "16K"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    QualityTier.T1K: "1K Standard",
    QualityTier.T2K: "2K High Definition",
    QualityTier.T4K: "4K Ultra HD",
    QualityTier.T8K: "8K Ultra Detailed",
    QualityTier.T16K: "16K Cinema Grade",
}


class SessionStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


class DisplayMode(str, Enum):
    ORIGINAL = "original"
    SIDE_BY_SIDE = "split"
    RESULT = "processed"


@dataclass(frozen=True)
class ImagePayload:
    """Raw image bytes plus the MIME type they were declared with."""

    data: bytes
    mime_type: str
    name: str = ""


@dataclass
class ImageState:
    original: bytes | None = None
    original_mime_type: str = ""
    original_name: str = ""
    result: bytes | None = None
    result_mime_type: str = ""

    @property
    def has_original(self) -> bool:
        return self.original is not None

    @property
    def has_result(self) -> bool:
        return self.result is not None

    def original_payload(self) -> ImagePayload | None:
        if self.original is None:
            return None
        return ImagePayload(self.original, self.original_mime_type, self.original_name)

    def result_payload(self) -> ImagePayload | None:
        if self.result is None:
            return None
        return ImagePayload(self.result, self.result_mime_type)

    def clear(self) -> None:
        self.original = None
        self.original_mime_type = ""
        self.original_name = ""
        self.result = None
        self.result_mime_type = ""


@dataclass
class EditSettings:
    mode: EditMode = EditMode.ENHANCE
    quality: QualityTier = QualityTier.T16K
    instruction: str = ""
