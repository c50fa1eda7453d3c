"""Shared fakes: a scripted camera and a stepping clock, so scans run without hardware."""

import threading
import time

import numpy as np
import pytest


def solid_frame(rgb: tuple[int, int, int], height: int = 48, width: int = 64) -> np.ndarray:
    """A BGR frame filled with one colour."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :] = (rgb[2], rgb[1], rgb[0])
    return frame


RED_FRAME = solid_frame((220, 30, 30))
GREY_FRAME = solid_frame((128, 128, 128))


class FakeCamera:
    """
    Replays `frames` one per call, then repeats the last one forever.

    With `release_gate`, `release()` blocks until the gate is set or
    `release_timeout` seconds pass, like a capture thread slow to exit.
    """

    def __init__(self, frames, open_ok: bool = True, release_gate: threading.Event | None = None,
                 release_timeout: float = 1.0):
        self._release_gate = release_gate
        self._release_timeout = release_timeout
        self._frames = list(frames)
        self._open_ok = open_ok
        self._lock = threading.Lock()
        self.opened = False
        self.released = False

    def open(self) -> bool:
        self.opened = self._open_ok
        return self._open_ok

    def wait_for_frame(self, timeout: float = 1.0):
        return self._frames[0] if self._frames else None

    def get_latest_frame(self):
        with self._lock:
            if len(self._frames) > 1:
                return self._frames.pop(0)
            return self._frames[0] if self._frames else None

    def release(self) -> None:
        if self._release_gate is not None:
            self._release_gate.wait(self._release_timeout)
        self.released = True


class FakeClock:
    """Monotonic clock that advances `step` seconds per call."""

    def __init__(self, step: float = 1.0):
        self._now = 0.0
        self._step = step

    def __call__(self) -> float:
        self._now += self._step
        return self._now


class ManualClock:
    """Clock that only moves when the test sets `now` (seconds)."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def red_camera():
    return FakeCamera([RED_FRAME])


@pytest.fixture
def grey_camera():
    return FakeCamera([GREY_FRAME])
