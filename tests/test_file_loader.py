from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from errors import ImageLoadError
from file_loader import load_from_file


def _write_image(path: Path, fmt: str) -> Path:
    Image.new("RGB", (8, 8), color=(255, 255, 255)).save(path, format=fmt)
    return path


def test_png_file_keeps_bytes(tmp_path: Path) -> None:
    path = _write_image(tmp_path / "note.png", "PNG")

    payload = load_from_file(path)

    assert payload.mime_type == "image/png"
    assert payload.decoded() == path.read_bytes()


def test_mime_is_sniffed_not_taken_from_extension(tmp_path: Path) -> None:
    path = _write_image(tmp_path / "photo.png", "JPEG")

    payload = load_from_file(path)

    assert payload.mime_type == "image/jpeg"


def test_gif_is_transcoded_to_png(tmp_path: Path) -> None:
    path = _write_image(tmp_path / "scan.gif", "GIF")

    payload = load_from_file(path)

    assert payload.mime_type == "image/png"
    with Image.open(io.BytesIO(payload.decoded())) as img:
        assert img.format == "PNG"
        assert img.size == (8, 8)


def test_undecodable_file_passes_through(tmp_path: Path) -> None:
    path = tmp_path / "broken.png"
    path.write_bytes(b"not really an image")

    payload = load_from_file(path)

    assert payload.mime_type == "image/png"
    assert payload.decoded() == b"not really an image"


def test_undecodable_file_without_known_extension_is_jpeg(tmp_path: Path) -> None:
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\x00\x01\x02")

    assert load_from_file(path).mime_type == "image/jpeg"


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ImageLoadError):
        load_from_file(tmp_path / "nope.png")


def test_empty_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "empty.png"
    path.write_bytes(b"")

    with pytest.raises(ImageLoadError):
        load_from_file(path)
