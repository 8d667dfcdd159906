"""
Model loading utilities for TorchScript matting models.

The loader:
 - loads a TorchScript checkpoint from `SEGMENTATION_MODEL_PATH`,
 - keeps a single shared instance per path on the inference device,
 - exposes `get_matting_model()` for inference callers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Tuple

import torch

from .errors import ServiceUnavailable

logger = logging.getLogger(__name__)

_MODELS: Dict[Path, torch.jit.ScriptModule] = {}
# Prefer CUDA -> Apple MPS -> CPU to support both GPU servers and local macOS dev.
if torch.cuda.is_available():
    _DEVICE = torch.device("cuda")
elif torch.backends.mps.is_available():  # type: ignore[attr-defined]
    _DEVICE = torch.device("mps")
else:
    _DEVICE = torch.device("cpu")
_LOCK = Lock()


def _load_torchscript(model_path: Path) -> torch.jit.ScriptModule:
    if not model_path.exists():
        raise ServiceUnavailable(f"Segmentation model not found at {model_path}")
    try:
        model = torch.jit.load(str(model_path), map_location=_DEVICE)
    except RuntimeError as exc:
        raise ServiceUnavailable(f"Failed to load segmentation model: {exc}") from exc
    model.eval()
    return model


def get_matting_model(model_path: Path) -> Tuple[torch.jit.ScriptModule, torch.device]:
    """
    Return the shared model + device pair for `model_path`.

    The model is loaded once on first access and kept in device memory to
    avoid re-initialization costs across requests.
    """
    model_path = Path(model_path)
    model = _MODELS.get(model_path)
    if model is not None:
        return model, _DEVICE

    with _LOCK:
        model = _MODELS.get(model_path)
        if model is None:
            logger.info("Loading TorchScript segmentation model from %s", model_path)
            model = _load_torchscript(model_path)
            _MODELS[model_path] = model
            logger.info("Segmentation model loaded on device: %s", _DEVICE)
    return model, _DEVICE


def clear_model_cache() -> None:
    with _LOCK:
        _MODELS.clear()
