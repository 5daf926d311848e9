"""Instruction text sent to the image model alongside the picture.

The model has no resolution parameter, so the quality tier is expressed as a
fixed sentence inside the instruction.
"""

from __future__ import annotations

from .models import EditMode, QualityTier

QUALITY_CLAUSES: dict[QualityTier, str] = {
    QualityTier.T16K: "Render in extremely high 16K resolution with microscopic detail and perfect sharpness.",
    QualityTier.T8K: "Render in 8K resolution with ultra-high detail.",
    QualityTier.T4K: "Render in 4K resolution with high detail.",
    QualityTier.T2K: "Render in standard high quality.",
    QualityTier.T1K: "Render in standard high quality.",
}

_ENHANCE_TEMPLATE = (
    "Upscale and enhance this image. {quality} "
    "Drastically improve clarity, texture details, lighting, and sharpness. "
    "Make it look like a high-end ultra-realistic photograph. {instruction}"
)

_REMOVE_BACKGROUND_TEMPLATE = (
    "Identify the main subject of this image and isolate it completely. "
    "Replace the entire background with a solid clean white color (#FFFFFF) "
    "to simulate background removal. "
    "Maintain ultra-high detail on the subject edges. {instruction}"
)


def quality_clause(quality: QualityTier) -> str:
    return QUALITY_CLAUSES[QualityTier(quality)]


def build_instruction(mode: EditMode, quality: QualityTier, instruction: str = "") -> str:
    """Map (mode, quality tier, free text) to the model instruction.

    The free text is appended verbatim after a single space, so an empty
    instruction leaves a trailing space.
    """
    if EditMode(mode) is EditMode.ENHANCE:
        return _ENHANCE_TEMPLATE.format(quality=quality_clause(quality), instruction=instruction)
    return _REMOVE_BACKGROUND_TEMPLATE.format(instruction=instruction)
