"""What the main panel shows for a given session.

Pure functions over committed state; the widgets in ``ui_comparison`` render
their output and never touch the session.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import DisplayMode, EditMode, EditSettings, ImageState, QualityTier


@dataclass(frozen=True)
class Pane:
    label: str
    data: bytes
    mime_type: str


def panes_for(image: ImageState, mode: DisplayMode) -> list[Pane]:
    if image.original is None:
        return []
    original = Pane("Original", image.original, image.original_mime_type)
    if image.result is None:
        return [original]
    result = Pane("Enhanced", image.result, image.result_mime_type)
    if mode is DisplayMode.ORIGINAL:
        return [original]
    if mode is DisplayMode.SIDE_BY_SIDE:
        return [original, result]
    return [result]


def processing_caption(settings: EditSettings) -> str:
    if settings.quality is QualityTier.T16K:
        size = " 16K"
    elif settings.quality is QualityTier.T8K:
        size = " 8K"
    else:
        size = " High Res"
    what = " details" if settings.mode is EditMode.ENHANCE else " matte"
    return f"Generating{size}{what}..."


def start_label(mode: EditMode) -> str:
    return "Start Enhancement" if mode is EditMode.ENHANCE else "Start Removal"


def instruction_placeholder(mode: EditMode) -> str:
    if mode is EditMode.ENHANCE:
        return "e.g., Make the skin texture clearer..."
    return "e.g., Replace background with neon city..."
