"""
High-level background-removal pipeline.

`remove_background` is the main entry point used by the HTTP API and the
local helper script. It keeps orchestration linear:
bytes in -> probe -> segment -> extract -> resample -> composite -> PNG out.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import time
from typing import Optional

import cv2
import numpy as np

from . import config
from .backends import build_segmenter
from .compositing import compose_alpha_raster
from .encoding import encode_png
from .extraction import extract_binary_mask
from .probe import probe_image_dimensions
from .resampling import resample_mask
from .segmentation import Segmenter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoveBackgroundResult:
    mask_png_bytes: bytes
    width: int
    height: int
    # Opaque; never interpreted here.
    revision: Optional[int] = None
    provider: Optional[str] = None
    model: Optional[str] = None


def _maybe_dump_debug(normalized: np.ndarray, resampled: np.ndarray, debug_dir: Path) -> None:
    """Optionally write the intermediate masks when DEBUG is enabled."""
    try:
        debug_dir.mkdir(parents=True, exist_ok=True)
        cv2.imwrite(str(debug_dir / "mask_normalized.png"), normalized)
        cv2.imwrite(str(debug_dir / "mask_resampled.png"), resampled)
        logger.debug("pipeline: wrote debug outputs to %s", debug_dir)
    except Exception as exc:  # noqa: BLE001
        logger.warning("pipeline: failed to write debug outputs: %s", exc)


def remove_background(
    image_bytes: bytes,
    segmenter: Optional[Segmenter] = None,
) -> RemoveBackgroundResult:
    """
    Full pipeline from encoded image bytes to a white RGBA PNG whose alpha is
    the subject mask at the image's exact size.

    Raises:
        DecodeError: the image cannot be probed; segmentation is not invoked.
        NoSubjectDetected, ServiceUnavailable: propagated from the backend.
        InvalidBufferLayout: the backend returned a degenerate buffer.
        EncodeError: the final raster could not be encoded.
    """
    settings = config.get_settings()
    started = time.perf_counter()

    width, height = probe_image_dimensions(image_bytes)

    if segmenter is None:
        segmenter = build_segmenter(settings)

    segmentation = segmenter.segment(image_bytes)
    instance = segmentation.top_instance()
    normalized = extract_binary_mask(instance)

    resampled = resample_mask(normalized, width, height)
    raster = compose_alpha_raster(resampled, width, height)
    png_bytes = encode_png(raster, width, height)

    if settings.debug:
        _maybe_dump_debug(normalized, resampled, Path(settings.debug_output_dir))

    logger.debug(
        "pipeline: provider=%s mask=%dx%d target=%dx%d revision=%s elapsed=%.1fms",
        segmenter.name,
        normalized.shape[1],
        normalized.shape[0],
        width,
        height,
        segmentation.revision,
        (time.perf_counter() - started) * 1000.0,
    )
    return RemoveBackgroundResult(
        mask_png_bytes=png_bytes,
        width=width,
        height=height,
        revision=segmentation.revision,
        provider=segmenter.name,
        model=segmenter.model,
    )
