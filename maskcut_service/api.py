"""
FastAPI layer exposing the background-removal pipeline to host applications.

Endpoints:
 - GET /health
 - POST /remove-background
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from . import config
from .backends import StaticMaskSegmenter
from .errors import (
    BackgroundRemovalError,
    DecodeError,
    EncodeError,
    InvalidBufferLayout,
    NoSubjectDetected,
    ServiceUnavailable,
    UnsupportedPlatform,
)
from .pipeline import remove_background

logging.basicConfig(level=getattr(logging, config.get_settings().log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Alpha Mask Background Removal Service", version="0.1.0")

# Most specific first: UnsupportedPlatform is a ServiceUnavailable.
ERROR_STATUS = (
    (DecodeError, 400),
    (NoSubjectDetected, 422),
    (UnsupportedPlatform, 501),
    (ServiceUnavailable, 503),
    (InvalidBufferLayout, 502),
    (EncodeError, 500),
)


class RemoveBackgroundRequest(BaseModel):
    imageBase64: str
    maskBase64: Optional[str] = None  # externally produced mask, any Pillow format
    maskRevision: Optional[int] = None


class RemoveBackgroundResponse(BaseModel):
    maskPngBase64: str
    width: int
    height: int
    revision: Optional[int] = None
    provider: Optional[str] = None
    model: Optional[str] = None


def _decode_base64(value: str, field: str) -> bytes:
    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Failed to decode {field} bytes: {exc}") from exc
    max_bytes = config.get_settings().max_image_bytes
    if len(data) > max_bytes:
        raise DecodeError(f"{field} exceeds {max_bytes} bytes")
    return data


def _status_for(error: BackgroundRemovalError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/remove-background", response_model=RemoveBackgroundResponse)
def remove_background_endpoint(body: RemoveBackgroundRequest):
    try:
        image_bytes = _decode_base64(body.imageBase64, "image")
        segmenter = None
        if body.maskBase64 is not None:
            segmenter = StaticMaskSegmenter(
                _decode_base64(body.maskBase64, "mask"), revision=body.maskRevision
            )
        result = remove_background(image_bytes, segmenter=segmenter)
    except BackgroundRemovalError as err:
        status = _status_for(err)
        if status >= 500:
            logger.exception("Background removal failed: %s", err)
        else:
            logger.info("Background removal rejected: %s", err.code)
        raise HTTPException(status_code=status, detail=err.to_dict()) from err
    except Exception as exc:  # noqa: BLE001
        logger.exception("Background removal failed: %s", exc)
        raise HTTPException(
            status_code=500,
            detail={"code": "internal_error", "message": "Background removal failed"},
        ) from exc

    return RemoveBackgroundResponse(
        maskPngBase64=base64.b64encode(result.mask_png_bytes).decode("ascii"),
        width=result.width,
        height=result.height,
        revision=result.revision,
        provider=result.provider,
        model=result.model,
    )
