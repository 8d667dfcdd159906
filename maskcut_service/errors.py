"""
Error taxonomy for the background-removal pipeline.

Every failure surfaced to callers is a `BackgroundRemovalError` carrying a
stable machine-readable `code`, so host applications can branch on the kind
of failure instead of matching message text.
"""

from __future__ import annotations


class BackgroundRemovalError(Exception):
    code = "background_removal_failed"
    retryable = False

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class DecodeError(BackgroundRemovalError):
    """Source bytes are not a valid image container, or decode to zero area."""

    code = "decode_error"


class NoSubjectDetected(BackgroundRemovalError):
    """Segmentation reported zero candidate instances."""

    code = "no_subject_detected"


class ServiceUnavailable(BackgroundRemovalError):
    """Segmentation capability could not be invoked or reported a platform error."""

    code = "service_unavailable"
    retryable = True


class UnsupportedPlatform(ServiceUnavailable):
    """No segmentation backend is available in this deployment."""

    code = "unsupported_platform"
    retryable = False


class InvalidBufferLayout(BackgroundRemovalError):
    """Segmentation output has a degenerate stride or width."""

    code = "invalid_buffer_layout"


class EncodeError(BackgroundRemovalError):
    code = "encode_error"


class PipelineInvariantError(RuntimeError):
    """Internal consistency fault between pipeline stages; indicates a bug."""
