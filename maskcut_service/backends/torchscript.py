"""
Software segmentation backend running a TorchScript matting model.

The model's matte is thresholded and split into connected components; each
component becomes one candidate instance, ranked by area.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import torch

from ..errors import ServiceUnavailable
from ..model_loader import get_matting_model
from ..preprocessing import image_to_model_input
from ..segmentation import RawMaskBuffer, SegmentationResult, Segmenter
from .buffers import pack_mask_rows

logger = logging.getLogger(__name__)

ROW_ALIGNMENT = 64


def _run_inference(model: torch.jit.ScriptModule, tensor: torch.Tensor) -> np.ndarray:
    """Return the matte as a float (H, W) array in [0, 1] at model resolution."""
    with torch.no_grad():
        output = model(tensor)
    if isinstance(output, (tuple, list)):
        # Matting networks commonly return (semantic, detail, matte).
        output = output[-1]
    matte = output.detach().cpu().numpy()
    matte = np.squeeze(matte)
    if matte.ndim != 2:
        raise ServiceUnavailable(f"Unexpected matte shape from model: {output.shape}")
    return np.clip(matte, 0.0, 1.0)


def split_instances(matte: np.ndarray, threshold: float, min_area_fraction: float) -> List[np.ndarray]:
    """Threshold the matte and return per-component masks, largest first."""
    binary = (matte > threshold).astype(np.uint8)
    num_labels, labels, stats, _ = cv2.connectedComponentsWithStats(binary, connectivity=8)
    if num_labels <= 1:
        return []

    min_area = min_area_fraction * binary.size
    areas = stats[1:, cv2.CC_STAT_AREA]
    order = np.argsort(-areas, kind="stable")
    instances = []
    for idx in order:
        if areas[idx] < min_area:
            continue
        instances.append(np.where(labels == idx + 1, 255, 0).astype(np.uint8))
    logger.debug(
        "torchscript: %d components above %.3f, %d kept", num_labels - 1, threshold, len(instances)
    )
    return instances


class TorchScriptSegmenter(Segmenter):
    name = "torchscript"

    def __init__(
        self,
        model_path: Path,
        max_long_edge: int = 1024,
        threshold: float = 0.5,
        min_area_fraction: float = 0.001,
    ):
        self.model_path = Path(model_path)
        self.model = self.model_path.stem
        self.max_long_edge = max_long_edge
        self.threshold = threshold
        self.min_area_fraction = min_area_fraction

    @staticmethod
    def _revision_of(model: torch.jit.ScriptModule) -> Optional[int]:
        revision = getattr(model, "revision", None)
        if revision is None:
            return None
        try:
            return int(revision)
        except (TypeError, ValueError):
            return None

    def segment(self, image_bytes: bytes) -> SegmentationResult:
        model, device = get_matting_model(self.model_path)
        tensor = image_to_model_input(image_bytes, self.max_long_edge, device)
        try:
            matte = _run_inference(model, tensor)
        except RuntimeError as exc:
            raise ServiceUnavailable(f"Segmentation model failed: {exc}") from exc

        instances: List[RawMaskBuffer] = [
            pack_mask_rows(mask, alignment=ROW_ALIGNMENT)
            for mask in split_instances(matte, self.threshold, self.min_area_fraction)
        ]
        return SegmentationResult(instances=instances, revision=self._revision_of(model))
