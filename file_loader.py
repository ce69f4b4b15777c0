"""Load a user-selected image file into an ImagePayload."""

from __future__ import annotations

import io
import logging
import mimetypes
from pathlib import Path

from errors import ImageLoadError
from models import ALLOWED_MIME_TYPES, DEFAULT_MIME_TYPE, ImagePayload

try:
    from PIL import Image, UnidentifiedImageError
except Exception:  # pragma: no cover
    Image = None  # type: ignore
    UnidentifiedImageError = OSError  # type: ignore

logger = logging.getLogger(__name__)

_PIL_FORMAT_TO_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "WEBP": "image/webp",
}


def _sniff_mime(raw: bytes) -> tuple[str | None, bool]:
    """Return (mime type, decodable) as reported by Pillow."""
    if Image is None:
        return None, False
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = (img.format or "").upper()
    except (UnidentifiedImageError, OSError, ValueError):
        return None, False
    return _PIL_FORMAT_TO_MIME.get(fmt), True


def _to_png(raw: bytes) -> bytes:
    with Image.open(io.BytesIO(raw)) as img:
        img.seek(0)
        if img.mode not in ("RGB", "RGBA", "L", "LA"):
            img = img.convert("RGBA")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    return buf.getvalue()


def load_from_file(path: str | Path) -> ImagePayload:
    """Read the whole file and pick its MIME type.

    Pillow-decodable formats outside the allow-list (gif, bmp, tiff, ...) are
    transcoded to PNG. Files Pillow cannot decode pass through as-is, typed by
    extension or as JPEG.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.warning("cannot read %s: %s", path, exc)
        raise ImageLoadError() from exc
    if not raw:
        logger.warning("empty image file %s", path)
        raise ImageLoadError()

    mime_type, decodable = _sniff_mime(raw)
    if mime_type is None and decodable:
        try:
            raw = _to_png(raw)
        except (OSError, ValueError) as exc:
            logger.warning("cannot transcode %s: %s", path, exc)
            raise ImageLoadError() from exc
        logger.info("transcoded %s to PNG", path.name)
        mime_type = "image/png"
    elif mime_type is None:
        guessed, _ = mimetypes.guess_type(path.name)
        mime_type = guessed if guessed in ALLOWED_MIME_TYPES else DEFAULT_MIME_TYPE
        logger.info("passing %s through unvalidated as %s", path.name, mime_type)

    return ImagePayload.from_bytes(raw, mime_type)
