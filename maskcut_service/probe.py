"""Image dimension probing, independent of segmentation."""

from __future__ import annotations

from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError


def probe_image_dimensions(image_bytes: bytes) -> Tuple[int, int]:
    """
    Return the (width, height) of an encoded image.

    Pillow only parses the container header on open, so pixel data is never
    decoded here. The returned size is the one the final mask must match.
    """
    if not image_bytes:
        raise DecodeError("Failed to decode image: empty input")
    try:
        with Image.open(BytesIO(image_bytes)) as image:
            width, height = image.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Failed to decode image: {exc}") from exc

    if width <= 0 or height <= 0:
        raise DecodeError(f"Failed to decode image: zero-area image {width}x{height}")
    return width, height
