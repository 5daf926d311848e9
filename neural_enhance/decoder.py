import contextlib
import os
from typing import Any

import numpy as np

from neural_enhance.logger import get_logger

_logger = get_logger("decoder")

_LIBVIPS_BIN = os.environ.get("LIBVIPS_BIN")
if _LIBVIPS_BIN and os.name == "nt":
    # Best-effort only; decoding will report import errors if any
    with contextlib.suppress(OSError):
        os.add_dll_directory(_LIBVIPS_BIN)


_pyvips: Any | None = None


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        _pyvips = pyvips
    return _pyvips


def _load_from_buffer(data: bytes, **options: Any) -> Any:
    pyvips = _get_pyvips_module()
    # Images are decoded once per edit; the operation cache only grows memory.
    with contextlib.suppress(Exception):
        pyvips.cache_set_max(0)
    return pyvips.Image.new_from_buffer(data, "", **options)


def _decode_with_pyvips_from_buffer(data: bytes) -> "np.ndarray":
    """Decode encoded image bytes into an RGB or RGBA uint8 numpy array."""
    image = _load_from_buffer(data)

    with contextlib.suppress(Exception):
        image = image.colourspace("srgb")
    if image.format != "uchar":
        image = image.cast("uchar")

    if image.hasalpha():
        if image.bands > 4:
            image = image.extract_band(0, n=4)
        elif image.bands == 2:
            grey, alpha = image.extract_band(0), image.extract_band(1)
            image = grey.bandjoin([grey, grey, alpha])
    elif image.bands > 3:
        image = image.extract_band(0, n=3)
    elif image.bands < 3:
        image = image.bandjoin([image] * (3 - image.bands))

    mem = image.write_to_memory()
    array = np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width, image.bands)
    array = array.copy()
    if array.shape[2] not in (3, 4):
        raise RuntimeError(f"Unsupported band count after conversion: {array.shape[2]}")
    return array


def decode_image_bytes(data: bytes) -> tuple[object | None, str | None]:
    """Decode image bytes into an RGB/RGBA numpy array using pyvips.

    Returns (array|None, error|None).
    """
    try:
        return _decode_with_pyvips_from_buffer(data), None
    except Exception as e:
        _logger.debug("decode failed: %s", e)
        return None, str(e)


def image_dimensions(data: bytes) -> tuple[int, int] | None:
    """Width and height from the image header, or None if unreadable."""
    try:
        image = _load_from_buffer(data, access="sequential")
        return int(image.width), int(image.height)
    except Exception as e:
        _logger.debug("could not read dimensions: %s", e)
        return None


def encode_png_bytes(data: bytes) -> bytes:
    """Re-encode arbitrary image bytes as PNG. Raises on undecodable input."""
    image = _load_from_buffer(data)
    return bytes(image.write_to_buffer(".png"))
