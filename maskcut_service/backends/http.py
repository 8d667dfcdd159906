"""
Backend delegating segmentation to a remote HTTP service.

The service receives the raw image bytes and answers with an encoded
single-channel mask for the top-ranked subject. 204/404/422 mean no subject.
"""

from __future__ import annotations

import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError
import requests

from ..errors import NoSubjectDetected, ServiceUnavailable
from ..segmentation import SegmentationResult, Segmenter
from .buffers import decode_mask_image, pack_mask_rows

logger = logging.getLogger(__name__)

REVISION_HEADER = "X-Segmentation-Revision"
MODEL_HEADER = "X-Segmentation-Model"
NO_SUBJECT_STATUSES = {204, 404, 422}


def _parse_revision(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("http segmenter: ignoring non-integer revision header %r", value)
        return None


class HttpSegmenter(Segmenter):
    name = "http"

    def __init__(
        self,
        service_url: str,
        timeout_seconds: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.service_url = service_url
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.model = None

    def segment(self, image_bytes: bytes) -> SegmentationResult:
        try:
            resp = self.session.post(
                self.service_url,
                data=image_bytes,
                headers={"Content-Type": "application/octet-stream"},
                timeout=(5, self.timeout_seconds),
            )
        except requests.RequestException as exc:
            raise ServiceUnavailable(f"Segmentation service unreachable: {exc}") from exc

        if resp.status_code in NO_SUBJECT_STATUSES:
            raise NoSubjectDetected("no_subject_detected")
        if resp.status_code >= 400:
            raise ServiceUnavailable(
                f"Segmentation service returned {resp.status_code}: {resp.text[:200]}"
            )

        try:
            mask = decode_mask_image(resp.content)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ServiceUnavailable(f"Segmentation service returned an unreadable mask: {exc}") from exc

        self.model = resp.headers.get(MODEL_HEADER, self.model)
        return SegmentationResult(
            instances=[pack_mask_rows(mask)],
            revision=_parse_revision(resp.headers.get(REVISION_HEADER)),
        )
