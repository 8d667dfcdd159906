"""
Backend for masks produced outside this service.

Callers that already hold a segmentation mask (from a client device, a
separate model server, a manual annotation) hand it over here so the rest of
the pipeline treats it exactly like a live segmentation result.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import ServiceUnavailable
from ..segmentation import SegmentationResult, Segmenter
from .buffers import decode_mask_image, pack_mask_rows


class StaticMaskSegmenter(Segmenter):
    name = "static"
    model = "precomputed-mask"

    def __init__(
        self,
        mask: Union[bytes, np.ndarray, None],
        revision: Optional[int] = None,
        row_alignment: int = 16,
    ):
        self._mask = mask
        self.revision = revision
        self.row_alignment = row_alignment

    def segment(self, image_bytes: bytes) -> SegmentationResult:
        if self._mask is None:
            return SegmentationResult(instances=[], revision=self.revision)

        if isinstance(self._mask, (bytes, bytearray)):
            try:
                array = decode_mask_image(bytes(self._mask))
            except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
                raise ServiceUnavailable(f"Failed to read supplied mask: {exc}") from exc
        else:
            array = self._mask

        buffer = pack_mask_rows(array, alignment=self.row_alignment)
        return SegmentationResult(instances=[buffer], revision=self.revision)
