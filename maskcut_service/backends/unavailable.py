from __future__ import annotations

from ..errors import UnsupportedPlatform
from ..segmentation import SegmentationResult, Segmenter


class UnavailableSegmenter(Segmenter):
    """Placeholder used when no segmentation backend is configured."""

    name = "none"

    def segment(self, image_bytes: bytes) -> SegmentationResult:
        raise UnsupportedPlatform("unsupported_platform")
