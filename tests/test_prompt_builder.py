from __future__ import annotations

import pytest

from neural_enhance.models import EditMode, QualityTier
from neural_enhance.prompt_builder import QUALITY_CLAUSES, build_instruction, quality_clause


@pytest.mark.parametrize(
    ("tier", "clause"),
    [
        (QualityTier.T16K, "Render in extremely high 16K resolution with microscopic detail and perfect sharpness."),
        (QualityTier.T8K, "Render in 8K resolution with ultra-high detail."),
        (QualityTier.T4K, "Render in 4K resolution with high detail."),
        (QualityTier.T2K, "Render in standard high quality."),
        (QualityTier.T1K, "Render in standard high quality."),
    ],
)
def test_enhance_contains_tier_clause(tier, clause):
    text = build_instruction(EditMode.ENHANCE, tier)
    assert quality_clause(tier) == clause
    assert clause in text
    assert text.startswith("Upscale and enhance this image. " + clause + " ")


def test_every_tier_has_a_clause():
    assert set(QUALITY_CLAUSES) == set(QualityTier)


def test_enhance_exact_text_with_empty_instruction_keeps_trailing_space():
    text = build_instruction(EditMode.ENHANCE, QualityTier.T4K, "")
    assert text == (
        "Upscale and enhance this image. Render in 4K resolution with high detail. "
        "Drastically improve clarity, texture details, lighting, and sharpness. "
        "Make it look like a high-end ultra-realistic photograph. "
    )


def test_remove_background_ignores_quality():
    a = build_instruction(EditMode.REMOVE_BACKGROUND, QualityTier.T1K, "keep shadows")
    b = build_instruction(EditMode.REMOVE_BACKGROUND, QualityTier.T16K, "keep shadows")
    assert a == b
    assert "#FFFFFF" in a
    assert "Render in" not in a


def test_free_text_appended_once_at_end():
    extra = "Make the skin texture clearer"
    for mode in EditMode:
        text = build_instruction(mode, QualityTier.T8K, extra)
        assert text.endswith(" " + extra)
        assert text.count(extra) == 1


def test_free_text_with_braces_is_not_interpreted():
    text = build_instruction(EditMode.ENHANCE, QualityTier.T2K, "use {quality} literally")
    assert text.endswith(" use {quality} literally")


def test_same_inputs_same_output():
    args = (EditMode.ENHANCE, QualityTier.T16K, "sharper eyes")
    assert build_instruction(*args) == build_instruction(*args)


def test_accepts_raw_enum_values():
    assert build_instruction("ENHANCE", "8K") == build_instruction(EditMode.ENHANCE, QualityTier.T8K)
