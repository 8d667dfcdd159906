"""Packing of the resampled mask into a white RGBA raster."""

from __future__ import annotations

import numpy as np

from .errors import PipelineInvariantError
from .extraction import NormalizedMask

FILL_RGB = (255, 255, 255)


def compose_alpha_raster(mask: NormalizedMask, width: int, height: int) -> np.ndarray:
    """
    Return a (height, width, 4) uint8 raster with constant white RGB.

    Only the alpha channel carries information; it is the mask verbatim.
    """
    if mask.size != width * height:
        raise PipelineInvariantError(
            f"mask has {mask.size} elements, expected {width}x{height}={width * height}"
        )
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = FILL_RGB
    rgba[..., 3] = np.asarray(mask, dtype=np.uint8).reshape(height, width)
    return rgba
