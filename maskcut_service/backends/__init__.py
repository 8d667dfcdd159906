"""Segmentation backends and the config-driven factory."""

from __future__ import annotations

import logging
from typing import Optional

from .. import config
from ..segmentation import Segmenter
from .http import HttpSegmenter
from .static import StaticMaskSegmenter
from .unavailable import UnavailableSegmenter

logger = logging.getLogger(__name__)

__all__ = [
    "HttpSegmenter",
    "StaticMaskSegmenter",
    "UnavailableSegmenter",
    "build_segmenter",
]


def build_segmenter(settings: Optional[config.Settings] = None) -> Segmenter:
    """Create the backend selected by SEGMENTATION_BACKEND."""
    settings = settings or config.get_settings()
    backend = settings.segmentation_backend

    if backend == "torchscript":
        if not settings.segmentation_model_path:
            raise ValueError("SEGMENTATION_MODEL_PATH is required for the torchscript backend")
        # torch is only imported when this backend is selected.
        from .torchscript import TorchScriptSegmenter

        return TorchScriptSegmenter(
            model_path=settings.segmentation_model_path,
            max_long_edge=settings.segmentation_max_long_edge,
            threshold=settings.segmentation_threshold,
            min_area_fraction=settings.segmentation_min_area_fraction,
        )
    if backend == "http":
        if not settings.segmentation_service_url:
            raise ValueError("SEGMENTATION_SERVICE_URL is required for the http backend")
        return HttpSegmenter(
            service_url=settings.segmentation_service_url,
            timeout_seconds=settings.request_timeout_seconds,
        )
    if backend == "static":
        # Static masks are supplied per call; there is no default mask.
        logger.info("SEGMENTATION_BACKEND=static: masks must be supplied by the caller")
    return UnavailableSegmenter()
