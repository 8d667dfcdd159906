"""
Mask resampling to the source image's exact dimensions.

Segmentation masks usually come back at a lower resolution than the image.
A separable triangle (linear) filter scales them up without the blocky steps
of nearest-neighbour and without the ringing of higher-order kernels.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .extraction import NormalizedMask

logger = logging.getLogger(__name__)

BAND_ROWS = 256


def _axis_taps(src_len: int, dst_len: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Two-tap triangle weights along one axis.

    Coordinates map corner to corner, so the first and last output samples
    land exactly on the first and last source samples. The right-hand
    neighbour past the last source sample clamps to the edge.
    """
    if src_len == 1 or dst_len == 1:
        coords = np.zeros(dst_len, dtype=np.float64)
    else:
        coords = np.arange(dst_len, dtype=np.float64) * (src_len - 1) / (dst_len - 1)
    lo = np.clip(np.floor(coords).astype(np.intp), 0, src_len - 1)
    hi = np.minimum(lo + 1, src_len - 1)
    weight_hi = coords - lo
    return lo, hi, weight_hi


def resample_mask(mask: NormalizedMask, width: int, height: int) -> NormalizedMask:
    """Scale `mask` to exactly (width, height); a no-op when sizes already match."""
    if mask.ndim != 2:
        raise ValueError(f"Expected a 2D mask, got shape {mask.shape}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Target size must be positive, got {width}x{height}")

    src_h, src_w = mask.shape
    if (src_w, src_h) == (width, height):
        return mask

    y_lo, y_hi, wy = _axis_taps(src_h, height)
    x_lo, x_hi, wx = _axis_taps(src_w, width)

    src = mask.astype(np.float32)
    wy = wy.astype(np.float32)
    wx = wx.astype(np.float32)
    resampled = np.empty((height, width), dtype=np.uint8)
    # Output rows are produced in bands so float scratch stays bounded for large targets.
    for start in range(0, height, BAND_ROWS):
        band = slice(start, min(start + BAND_ROWS, height))
        wy_band = wy[band, None]
        rows = src[y_lo[band]] * (1.0 - wy_band) + src[y_hi[band]] * wy_band
        out = rows[:, x_lo]
        out *= 1.0 - wx
        out += rows[:, x_hi] * wx
        out += 0.5
        np.floor(out, out=out)
        np.clip(out, 0, 255, out=out)
        resampled[band] = out
    logger.debug("resample: %dx%d -> %dx%d", src_w, src_h, width, height)
    return resampled
