"""Stride-aware extraction of a dense binary mask from a raw segmentation buffer."""

from __future__ import annotations

import logging

import numpy as np
from numpy.lib.stride_tricks import as_strided

from .errors import InvalidBufferLayout
from .segmentation import RawMaskBuffer

logger = logging.getLogger(__name__)

# Dense (height, width) uint8 array, row-major, no padding.
NormalizedMask = np.ndarray

MASK_ON = 255
MASK_OFF = 0


def _validate_layout(buffer: RawMaskBuffer) -> int:
    if buffer.width == 0:
        raise InvalidBufferLayout("Invalid mask buffer stride: zero width")
    bytes_per_pixel = buffer.bytes_per_pixel
    if bytes_per_pixel == 0:
        raise InvalidBufferLayout(
            f"Invalid mask buffer stride: bytes_per_row={buffer.bytes_per_row} width={buffer.width}"
        )
    if buffer.height == 0:
        raise InvalidBufferLayout("Invalid mask buffer stride: zero height")
    return bytes_per_pixel


def extract_binary_mask(buffer: RawMaskBuffer) -> NormalizedMask:
    """
    Binarize the first channel of every pixel into {0, 255}.

    Rows are addressed by `bytes_per_row`, so alignment padding at the end of
    each row is skipped rather than read as pixels. Any channel beyond the
    first is ignored. Soft mask values collapse to fully on.
    """
    bytes_per_pixel = _validate_layout(buffer)
    width, height, stride = buffer.width, buffer.height, buffer.bytes_per_row
    span = (height - 1) * stride + (width - 1) * bytes_per_pixel + 1

    with buffer.locked() as view:
        raw = np.frombuffer(view, dtype=np.uint8)
        if raw.size < span:
            raise InvalidBufferLayout(
                f"Mask buffer too short: {raw.size} bytes for {width}x{height} at stride {stride}"
            )
        samples = as_strided(
            raw,
            shape=(height, width),
            strides=(stride, bytes_per_pixel),
            writeable=False,
        )
        mask = np.where(samples > 0, MASK_ON, MASK_OFF).astype(np.uint8)

    logger.debug(
        "extract: %dx%d stride=%d bpp=%d coverage=%.4f",
        width,
        height,
        stride,
        bytes_per_pixel,
        float(np.count_nonzero(mask)) / mask.size,
    )
    return mask
