"""
Foreground alpha-mask service package.

Exposes reusable primitives for probing images, normalizing and resampling
segmentation masks, composing the alpha raster, and serving the FastAPI
application.
"""

from .errors import (
    BackgroundRemovalError,
    DecodeError,
    EncodeError,
    InvalidBufferLayout,
    NoSubjectDetected,
    ServiceUnavailable,
    UnsupportedPlatform,
)
from .pipeline import RemoveBackgroundResult, remove_background

__all__ = [
    "BackgroundRemovalError",
    "DecodeError",
    "EncodeError",
    "InvalidBufferLayout",
    "NoSubjectDetected",
    "RemoveBackgroundResult",
    "ServiceUnavailable",
    "UnsupportedPlatform",
    "remove_background",
]
