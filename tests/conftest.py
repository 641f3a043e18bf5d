"""Shared pytest fixtures: small real images written with Pillow."""
import logging
from pathlib import Path

import pytest
from PIL import Image

FORMAT_BY_EXT = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "webp": "WEBP",
    "bmp": "BMP",
    "tif": "TIFF",
    "tiff": "TIFF",
    "gif": "GIF",
}


@pytest.fixture
def make_image():
    """Write a solid-color image; the format follows the file extension."""

    def _make(path: Path, mode: str = "RGB", size=(16, 16)) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        color = (200, 40, 40, 128) if mode == "RGBA" else (200, 40, 40)
        img = Image.new(mode, size, color)
        img.save(path, format=FORMAT_BY_EXT[path.suffix[1:].lower()])
        return path

    return _make


@pytest.fixture
def corrupt_file():
    """Write bytes that no decoder accepts under an image extension."""

    def _make(path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"this is not an image")
        return path

    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handlers installed by configure_logging so they never outlive a test's capture."""
    yield
    logger = logging.getLogger("imageflip")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
