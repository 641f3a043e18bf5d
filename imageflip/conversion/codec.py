"""Pillow-backed decode/encode used by the conversion worker."""
from pathlib import Path

from PIL import Image

from imageflip.conversion.formats import ImageFormat


class PillowCodec:
    """Thin adapter over Pillow. Any exception raised here is a per-item failure."""

    def decode(self, path: Path) -> Image.Image:
        with Image.open(path) as img:
            img.load()
            # Detach from the file handle closed by the context manager.
            return img.copy()

    def encode(self, image: Image.Image, fmt: ImageFormat, path: Path) -> None:
        image.save(path, format=fmt.pillow_format)


def _to_8bit_gray(image: Image.Image) -> Image.Image:
    """Rescale a 16/32-bit single-channel image into ``L`` instead of clamping it."""
    if image.mode.startswith("I;16"):
        return image.convert("I").point(lambda v: v * (1 / 257)).convert("L")
    lo, hi = image.getextrema()
    if image.mode == "F" and lo >= 0 and hi <= 1:
        scale, offset = 255, 0
    elif lo >= 0 and hi <= 255:
        scale, offset = 1, 0
    elif lo >= 0 and hi <= 65535:
        scale, offset = 1 / 257, 0
    else:
        scale = 255 / (hi - lo) if hi > lo else 0
        offset = -lo * scale
    return image.point(lambda v: v * scale + offset).convert("L")


def normalize(image: Image.Image) -> Image.Image:
    """Coerce to 8-bit RGB. Alpha is dropped on purpose, for every target format.

    Wide single-channel modes (``I;16*``, ``I``, ``F``) are rescaled to 8 bits
    first; a plain ``convert("RGB")`` would clamp them to white.
    """
    if image.mode == "RGB":
        return image
    if image.mode.startswith("I;16") or image.mode in ("I", "F"):
        gray = _to_8bit_gray(image)
        try:
            return gray.convert("RGB")
        finally:
            gray.close()
    return image.convert("RGB")
