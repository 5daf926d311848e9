"""Reading user images from disk and writing edited results back out."""

from __future__ import annotations

import asyncio
import mimetypes
import time
from pathlib import Path

from .decoder import encode_png_bytes
from .errors import InvalidFileType
from .logger import get_logger
from .models import ImagePayload, ImageState

_logger = get_logger("file_ops")

# Not every platform's mimetypes table knows the newer formats.
for _mime, _ext in (("image/webp", ".webp"), ("image/avif", ".avif"), ("image/heic", ".heic")):
    mimetypes.add_type(_mime, _ext)

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif *.tif *.tiff *.avif *.heic)"
PNG_MIME_TYPE = "image/png"


def declared_mime_type(path: str | Path) -> str:
    mime, _ = mimetypes.guess_type(str(path))
    return mime or ""


def is_image_file(path: str | Path) -> bool:
    return declared_mime_type(path).startswith("image/")


def _read_payload(path: Path, mime_type: str) -> ImagePayload:
    data = path.read_bytes()
    _logger.debug("read %s (%d bytes, %s)", path.name, len(data), mime_type)
    return ImagePayload(data=data, mime_type=mime_type, name=path.name)


async def read_image_file(path: str | Path) -> ImagePayload:
    """Read an image file without blocking the event loop.

    Raises InvalidFileType when the file is not declared as an image and
    OSError when it cannot be read. Size and completeness are not checked.
    """
    p = Path(path)
    mime_type = declared_mime_type(p)
    if not mime_type.startswith("image/"):
        raise InvalidFileType(mime_type or None)
    return await asyncio.to_thread(_read_payload, p, mime_type)


def export_filename(now: float | None = None) -> str:
    stamp = int((time.time() if now is None else now) * 1000)
    return f"enhanced-{stamp}.png"


def export_result(image: ImageState, directory: str | Path, now: float | None = None) -> Path:
    """Write the edited image as ``enhanced-<epoch ms>.png`` inside ``directory``.

    Results the model declared as something other than PNG are re-encoded so
    the file contents match the extension.
    """
    if image.result is None:
        raise ValueError("no result to export")

    data = image.result
    if image.result_mime_type and image.result_mime_type != PNG_MIME_TYPE:
        _logger.debug("transcoding %s result to png", image.result_mime_type)
        data = encode_png_bytes(data)

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / export_filename(now)
    target.write_bytes(data)
    _logger.info("exported result: %s", target)
    return target
