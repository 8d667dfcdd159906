"""Lossless PNG encoding of the output raster."""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image

from .errors import EncodeError


def encode_png(raster: np.ndarray, width: int, height: int) -> bytes:
    """Serialize an RGBA raster to PNG bytes. Same raster in, same bytes out."""
    if raster.size != width * height * 4:
        raise EncodeError(
            f"Failed to encode mask PNG: raster has {raster.size} bytes, expected {width * height * 4}"
        )
    try:
        image = Image.fromarray(
            np.ascontiguousarray(raster, dtype=np.uint8).reshape(height, width, 4)
        )
        buf = BytesIO()
        image.save(buf, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Failed to encode mask PNG: {exc}") from exc
    return buf.getvalue()
