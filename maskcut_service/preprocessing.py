"""
Model input preparation for the TorchScript segmentation backend.

The matte the model produces stays at the input resolution; the pipeline
rescales the final mask to the source size, so nothing about the original
size needs to travel with the tensor.
"""

from __future__ import annotations

from io import BytesIO
import math
from typing import Tuple

import numpy as np
from PIL import Image
import torch

from .errors import DecodeError

# Encoder/decoder stride chains need dimensions divisible by this.
SIZE_MULTIPLE = 32


def model_input_size(width: int, height: int, max_long_edge: int) -> Tuple[int, int]:
    """Constrain the longest edge to `max_long_edge`, keeping aspect ratio."""
    if max_long_edge <= 0 or max(width, height) <= max_long_edge:
        return width, height
    scale = max_long_edge / max(width, height)
    new_w = max(SIZE_MULTIPLE, math.ceil(int(width * scale) / SIZE_MULTIPLE) * SIZE_MULTIPLE)
    new_h = max(SIZE_MULTIPLE, math.ceil(int(height * scale) / SIZE_MULTIPLE) * SIZE_MULTIPLE)
    return new_w, new_h


def image_to_model_input(image_bytes: bytes, max_long_edge: int, device: torch.device) -> torch.Tensor:
    """Decode to RGB, downscale large images, and return a (1, 3, H, W) tensor in [-1, 1]."""
    try:
        image = Image.open(BytesIO(image_bytes)).convert("RGB")
    except Exception as exc:  # noqa: BLE001
        raise DecodeError(f"Failed to decode image for segmentation: {exc}") from exc

    size = model_input_size(image.width, image.height, max_long_edge)
    if size != image.size:
        image = image.resize(size, Image.BILINEAR)

    chw = np.asarray(image, dtype=np.float32).transpose(2, 0, 1) / 127.5 - 1.0
    return torch.from_numpy(np.ascontiguousarray(chw)).unsqueeze(0).to(device)
