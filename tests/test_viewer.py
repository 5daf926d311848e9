from __future__ import annotations

from neural_enhance.models import DisplayMode, EditMode, EditSettings, ImageState, QualityTier
from neural_enhance.viewer import instruction_placeholder, panes_for, processing_caption, start_label


def _labels(image, mode):
    return [p.label for p in panes_for(image, mode)]


def test_no_image_shows_nothing():
    assert panes_for(ImageState(), DisplayMode.SIDE_BY_SIDE) == []


def test_without_result_only_original_regardless_of_mode():
    image = ImageState(original=b"o", original_mime_type="image/jpeg")
    for mode in DisplayMode:
        assert _labels(image, mode) == ["Original"]


def test_display_modes_with_result():
    image = ImageState(original=b"o", original_mime_type="image/jpeg", result=b"r", result_mime_type="image/png")
    assert _labels(image, DisplayMode.ORIGINAL) == ["Original"]
    assert _labels(image, DisplayMode.RESULT) == ["Enhanced"]
    assert _labels(image, DisplayMode.SIDE_BY_SIDE) == ["Original", "Enhanced"]

    left, right = panes_for(image, DisplayMode.SIDE_BY_SIDE)
    assert (left.data, left.mime_type) == (b"o", "image/jpeg")
    assert (right.data, right.mime_type) == (b"r", "image/png")


def test_processing_caption():
    assert processing_caption(EditSettings(EditMode.ENHANCE, QualityTier.T16K)) == "Generating 16K details..."
    assert processing_caption(EditSettings(EditMode.ENHANCE, QualityTier.T8K)) == "Generating 8K details..."
    assert processing_caption(EditSettings(EditMode.ENHANCE, QualityTier.T2K)) == "Generating High Res details..."
    assert processing_caption(EditSettings(EditMode.REMOVE_BACKGROUND, QualityTier.T4K)) == "Generating High Res matte..."


def test_labels_follow_mode():
    assert start_label(EditMode.ENHANCE) == "Start Enhancement"
    assert start_label(EditMode.REMOVE_BACKGROUND) == "Start Removal"
    assert "skin texture" in instruction_placeholder(EditMode.ENHANCE)
    assert "neon city" in instruction_placeholder(EditMode.REMOVE_BACKGROUND)


def test_tier_labels():
    assert [t.label for t in QualityTier] == [
        "1K Standard",
        "2K High Definition",
        "4K Ultra HD",
        "8K Ultra Detailed",
        "16K Cinema Grade",
    ]
