"""Tests for the raw mask buffer lock scope and instance ranking."""

from __future__ import annotations

import threading

import pytest

from maskcut_service.errors import NoSubjectDetected
from maskcut_service.segmentation import RawMaskBuffer, SegmentationResult


class LockCounter:
    def __init__(self) -> None:
        self.locks = 0
        self.unlocks = 0

    def lock(self) -> None:
        self.locks += 1

    def unlock(self) -> None:
        self.unlocks += 1


def test_bytes_per_pixel_is_derived_from_stride() -> None:
    assert RawMaskBuffer(bytes(64), width=4, height=4, bytes_per_row=16).bytes_per_pixel == 4
    assert RawMaskBuffer(bytes(30), width=10, height=3, bytes_per_row=10).bytes_per_pixel == 1
    assert RawMaskBuffer(b"", width=10, height=3, bytes_per_row=0).bytes_per_pixel == 0
    assert RawMaskBuffer(b"", width=0, height=3, bytes_per_row=8).bytes_per_pixel == 0


def test_locked_releases_once_on_success() -> None:
    counter = LockCounter()
    buffer = RawMaskBuffer(b"\x01\x02", 2, 1, 2, on_lock=counter.lock, on_unlock=counter.unlock)

    with buffer.locked() as view:
        assert buffer.is_locked
        assert bytes(view) == b"\x01\x02"
        assert view.readonly

    assert not buffer.is_locked
    assert (counter.locks, counter.unlocks) == (1, 1)


def test_locked_releases_once_on_error() -> None:
    counter = LockCounter()
    buffer = RawMaskBuffer(b"\x01", 1, 1, 1, on_lock=counter.lock, on_unlock=counter.unlock)

    with pytest.raises(RuntimeError):
        with buffer.locked():
            raise RuntimeError("boom")

    assert not buffer.is_locked
    assert (counter.locks, counter.unlocks) == (1, 1)

    # The buffer can be acquired again after a failed scope.
    with buffer.locked():
        pass
    assert (counter.locks, counter.unlocks) == (2, 2)


def test_failed_platform_lock_does_not_leave_buffer_locked() -> None:
    def refuse() -> None:
        raise OSError("lock refused")

    buffer = RawMaskBuffer(b"\x01", 1, 1, 1, on_lock=refuse)

    with pytest.raises(OSError):
        with buffer.locked():
            pass

    assert not buffer.is_locked


def test_top_instance_returns_highest_ranked() -> None:
    first = RawMaskBuffer(b"\x01", 1, 1, 1)
    second = RawMaskBuffer(b"\x00", 1, 1, 1)

    assert SegmentationResult(instances=[first, second], revision=3).top_instance() is first


def test_top_instance_without_candidates_raises() -> None:
    with pytest.raises(NoSubjectDetected) as excinfo:
        SegmentationResult(instances=[]).top_instance()

    assert excinfo.value.code == "no_subject_detected"


def test_second_acquisition_waits_for_release() -> None:
    buffer = RawMaskBuffer(b"\x01", 1, 1, 1)
    first_inside = threading.Event()
    release_first = threading.Event()
    events = []

    def hold() -> None:
        with buffer.locked():
            events.append("first-in")
            first_inside.set()
            release_first.wait(5)
            events.append("first-out")

    def contend() -> None:
        first_inside.wait(5)
        with buffer.locked():
            events.append("second-in")

    holder = threading.Thread(target=hold)
    contender = threading.Thread(target=contend)
    holder.start()
    contender.start()

    assert first_inside.wait(5)
    contender.join(timeout=0.2)
    assert contender.is_alive()
    assert "second-in" not in events

    release_first.set()
    holder.join(5)
    contender.join(5)

    assert not holder.is_alive() and not contender.is_alive()
    assert events == ["first-in", "first-out", "second-in"]
    assert not buffer.is_locked
