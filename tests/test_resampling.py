"""Tests for triangle-filter mask resampling."""

from __future__ import annotations

import numpy as np
import pytest

from maskcut_service.resampling import resample_mask


def _random_binary_mask(height: int, width: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return np.where(rng.random((height, width)) > 0.5, 255, 0).astype(np.uint8)


def test_matching_size_is_identity() -> None:
    mask = _random_binary_mask(7, 9)

    assert resample_mask(mask, 9, 7) is mask


@pytest.mark.parametrize(
    "src, dst",
    [
        ((5, 5), (13, 17)),
        ((50, 50), (100, 100)),
        ((17, 13), (4, 3)),
        ((8, 3), (2, 11)),
        ((6, 6), (1, 1)),
        ((1, 9), (4, 4)),
    ],
)
def test_output_has_exact_target_shape(src, dst) -> None:
    mask = _random_binary_mask(*src)

    out = resample_mask(mask, width=dst[1], height=dst[0])

    assert out.shape == dst
    assert out.dtype == np.uint8


@pytest.mark.parametrize(
    "src, dst",
    [((5, 7), (20, 31)), ((40, 30), (9, 11)), ((3, 64), (64, 3)), ((2, 2), (3, 3))],
)
def test_corners_are_preserved_for_any_scale(src, dst) -> None:
    mask = _random_binary_mask(*src, seed=sum(src) + sum(dst))

    out = resample_mask(mask, width=dst[1], height=dst[0])

    for y, x in ((0, 0), (0, -1), (-1, 0), (-1, -1)):
        assert out[y, x] == mask[y, x]


def test_uniform_mask_stays_uniform() -> None:
    full = np.full((50, 50), 255, dtype=np.uint8)
    empty = np.zeros((50, 50), dtype=np.uint8)

    assert np.all(resample_mask(full, 100, 100) == 255)
    assert np.all(resample_mask(empty, 100, 100) == 0)


def test_linear_ramp_between_edge_samples() -> None:
    mask = np.array([[0, 255]], dtype=np.uint8)

    out = resample_mask(mask, width=4, height=1)

    np.testing.assert_array_equal(out, [[0, 85, 170, 255]])


def test_midpoint_rounds_half_up() -> None:
    mask = np.array([[0, 255]], dtype=np.uint8)

    out = resample_mask(mask, width=3, height=2)

    np.testing.assert_array_equal(out, [[0, 128, 255], [0, 128, 255]])


def test_single_sample_source_fills_target() -> None:
    mask = np.array([[255]], dtype=np.uint8)

    assert np.all(resample_mask(mask, 6, 4) == 255)


def test_rejects_non_positive_target() -> None:
    with pytest.raises(ValueError):
        resample_mask(np.zeros((2, 2), dtype=np.uint8), 0, 2)


def test_tall_targets_are_continuous_across_row_bands() -> None:
    mask = np.array([[0], [255]], dtype=np.uint8)

    out = resample_mask(mask, width=3, height=600)

    expected = np.floor(255.0 * np.arange(600) / 599 + 0.5).astype(np.uint8)
    assert out.shape == (600, 3)
    for column in range(3):
        np.testing.assert_array_equal(out[:, column], expected)
