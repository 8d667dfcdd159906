"""Tests for image dimension probing."""

from __future__ import annotations

import pytest

from maskcut_service.errors import DecodeError
from maskcut_service.probe import probe_image_dimensions


def test_probe_reads_png_dimensions(make_image) -> None:
    assert probe_image_dimensions(make_image(37, 11)) == (37, 11)


def test_probe_reads_jpeg_dimensions(make_image) -> None:
    assert probe_image_dimensions(make_image(64, 48, fmt="JPEG")) == (64, 48)


@pytest.mark.parametrize("payload", [b"", b"not an image", b"\x00" * 32])
def test_probe_rejects_invalid_containers(payload: bytes) -> None:
    with pytest.raises(DecodeError) as excinfo:
        probe_image_dimensions(payload)

    assert excinfo.value.code == "decode_error"


def test_probe_rejects_zero_area_image(make_png_header) -> None:
    with pytest.raises(DecodeError):
        probe_image_dimensions(make_png_header(0, 16))


def test_probe_rejects_oversized_image(make_png_header) -> None:
    with pytest.raises(DecodeError) as excinfo:
        probe_image_dimensions(make_png_header(20000, 20000))

    assert excinfo.value.code == "decode_error"
