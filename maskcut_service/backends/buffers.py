"""Helpers for backends that produce masks as numpy arrays."""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image

from ..segmentation import RawMaskBuffer


def aligned_stride(row_bytes: int, alignment: int) -> int:
    if alignment <= 1:
        return row_bytes
    return -(-row_bytes // alignment) * alignment


def pack_mask_rows(mask: np.ndarray, alignment: int = 1) -> RawMaskBuffer:
    """
    Lay a (H, W) or (H, W, C) uint8 array out as a row-padded byte buffer.

    Rows are padded to a multiple of `alignment` bytes, the same layout
    platform pixel buffers use, unless the padding would reach `width`
    bytes; such narrow rows are left unpadded.
    """
    arr = np.asarray(mask)
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    if arr.ndim == 2:
        arr = arr[..., None]
    if arr.ndim != 3:
        raise ValueError(f"Expected a 2D or 3D mask array, got shape {arr.shape}")

    height, width, channels = arr.shape
    stride = aligned_stride(width * channels, alignment)
    if width and stride // width != channels:
        # bytes_per_pixel is derived as stride // width, so padding must stay under width bytes.
        stride = width * channels
    packed = np.zeros((height, stride), dtype=np.uint8)
    packed[:, : width * channels] = arr.reshape(height, width * channels)
    return RawMaskBuffer(packed.tobytes(), width=width, height=height, bytes_per_row=stride)


def decode_mask_image(mask_bytes: bytes) -> np.ndarray:
    """Decode an encoded single-channel mask (any Pillow format) to (H, W) uint8."""
    with Image.open(BytesIO(mask_bytes)) as image:
        if image.mode in ("RGBA", "LA"):
            return np.asarray(image.getchannel("A"), dtype=np.uint8)
        return np.asarray(image.convert("L"), dtype=np.uint8)
