"""
Segmentation backend contract.

A backend takes encoded image bytes and returns ranked foreground instance
masks as raw, possibly row-padded byte buffers. Only the top-ranked instance
is consumed by the pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from threading import Lock
from typing import Callable, Iterator, List, Optional, Union

from .errors import NoSubjectDetected

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


class RawMaskBuffer:
    """
    Single-channel mask pixels as produced by a segmentation backend.

    `bytes_per_row` may exceed `width * bytes_per_pixel` when rows are padded
    for alignment. Pixel bytes are only reachable through `locked()`, which
    acquires the buffer once and releases it exactly once however the block
    exits. Backends holding platform resources pass `on_lock` / `on_unlock`
    to pin and unpin them for the duration.
    """

    def __init__(
        self,
        data: Buffer,
        width: int,
        height: int,
        bytes_per_row: int,
        on_lock: Optional[Callable[[], None]] = None,
        on_unlock: Optional[Callable[[], None]] = None,
    ):
        if width < 0 or height < 0 or bytes_per_row < 0:
            raise ValueError("mask buffer dimensions must be non-negative")
        self._data = data
        self.width = width
        self.height = height
        self.bytes_per_row = bytes_per_row
        self._on_lock = on_lock
        self._on_unlock = on_unlock
        self._lock = Lock()

    @property
    def bytes_per_pixel(self) -> int:
        if self.width <= 0:
            return 0
        return self.bytes_per_row // self.width

    @property
    def is_locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def locked(self) -> Iterator[memoryview]:
        """Yield a read-only view of the pixel bytes for the scope of the block."""
        self._lock.acquire()
        try:
            if self._on_lock is not None:
                self._on_lock()
        except BaseException:
            self._lock.release()
            raise
        try:
            yield memoryview(self._data).toreadonly()
        finally:
            try:
                if self._on_unlock is not None:
                    self._on_unlock()
            finally:
                self._lock.release()

    def __repr__(self) -> str:
        return (
            f"RawMaskBuffer(width={self.width}, height={self.height}, "
            f"bytes_per_row={self.bytes_per_row})"
        )


@dataclass
class SegmentationResult:
    # Ranked best first.
    instances: List[RawMaskBuffer] = field(default_factory=list)
    revision: Optional[int] = None

    def top_instance(self) -> RawMaskBuffer:
        if not self.instances:
            raise NoSubjectDetected("no_subject_detected")
        if len(self.instances) > 1:
            logger.debug("segmentation: discarding %d lower-ranked instances", len(self.instances) - 1)
        return self.instances[0]


class Segmenter(ABC):
    """Pluggable foreground instance segmentation capability."""

    name: str = "base"
    model: Optional[str] = None

    @abstractmethod
    def segment(self, image_bytes: bytes) -> SegmentationResult:
        """
        Segment foreground instances in an encoded image.

        Raises:
            ServiceUnavailable: when the capability cannot be invoked.
        """
        raise NotImplementedError
