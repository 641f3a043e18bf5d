"""Supported image formats and extension lookup."""
from enum import Enum
from typing import Optional

from imageflip.conversion.exceptions import UnsupportedFormatError


class ImageFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    BMP = "bmp"
    TIFF = "tiff"
    GIF = "gif"
    ICO = "ico"

    @property
    def pillow_format(self) -> str:
        """Format name understood by ``PIL.Image.save``."""
        return self.value.upper()


# Extension spelling -> format. Matching is case-sensitive.
EXTENSION_FORMATS = {
    "png": ImageFormat.PNG,
    "jpg": ImageFormat.JPEG,
    "jpeg": ImageFormat.JPEG,
    "webp": ImageFormat.WEBP,
    "bmp": ImageFormat.BMP,
    "tiff": ImageFormat.TIFF,
    "tif": ImageFormat.TIFF,
    "gif": ImageFormat.GIF,
    "ico": ImageFormat.ICO,
}

IMAGE_EXTENSIONS = frozenset(EXTENSION_FORMATS)


def lookup(extension: str) -> ImageFormat:
    """Map an extension string to its format, or raise UnsupportedFormatError."""
    try:
        return EXTENSION_FORMATS[extension]
    except KeyError:
        raise UnsupportedFormatError(extension) from None


def is_image_extension(extension: Optional[str]) -> bool:
    return extension in EXTENSION_FORMATS
