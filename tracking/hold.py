"""
tracking/hold.py — Hold-to-confirm debouncer
=============================================
Turns a noisy stream of per-frame colour labels into a single decision.
A label is confirmed only once it has been observed *continuously* for
`HOLD_DURATION_MS`; any interruption restarts the hold from scratch.

States
------
    Idle                     no label held
    Holding(label, since)    `label` seen on every tick since `since`

Transitions (evaluated in this order on every `observe()` call)
---------------------------------------------------------------
    1. label is None          → Idle,                      PENDING
    2. label != held label    → Holding(label, now),       PENDING
    3. label == held label    → elapsed ≥ duration ? Idle + CONFIRMED
                                                   : stay,  PENDING

Timestamps are milliseconds and must be non-decreasing for a given
tracker.  The tracker owns no clock or timer, so tests can drive it with
plain integers.  It is not thread-safe: use one driving loop per instance.
"""

import math
from dataclasses import dataclass
from enum import Enum

from vision.classifier import ColorLabel
from config import HOLD_DURATION_MS


class HoldStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class HoldState:
    """Snapshot of the tracker.  Both fields are None or both are set."""
    current_label: ColorLabel | None = None
    hold_start_ms: float | None = None

    @property
    def is_idle(self) -> bool:
        return self.current_label is None


@dataclass(frozen=True)
class HoldResult:
    """
    Outcome of one `observe()` call.

    label             : held label while PENDING, confirmed label when
                        CONFIRMED, None while Idle.
    remaining_seconds : whole seconds left on the countdown while holding,
                        None otherwise.
    """
    status: HoldStatus
    label: ColorLabel | None = None
    remaining_seconds: int | None = None

    @property
    def confirmed(self) -> bool:
        return self.status is HoldStatus.CONFIRMED


_IDLE = HoldState()


class HoldTracker:
    """
    Stateful debouncer for colour labels.

    Parameters
    ----------
    hold_duration_ms : float   How long a label must persist (default 5000).
    """

    def __init__(self, hold_duration_ms: float = HOLD_DURATION_MS):
        if hold_duration_ms <= 0:
            raise ValueError(f"hold_duration_ms must be positive, got {hold_duration_ms}.")
        self._hold_duration_ms = hold_duration_ms
        self._state = _IDLE

    @property
    def hold_duration_ms(self) -> float:
        return self._hold_duration_ms

    @property
    def state(self) -> HoldState:
        return self._state

    def reset(self) -> None:
        """Drop any hold in progress."""
        self._state = _IDLE

    def observe(self, label: ColorLabel | None, now_ms: float) -> HoldResult:
        """Feed one tick's label and report whether a hold has completed."""
        if label is None:
            self._state = _IDLE
            return HoldResult(HoldStatus.PENDING)

        if label != self._state.current_label:
            self._state = HoldState(label, now_ms)
            return HoldResult(HoldStatus.PENDING, label, self._remaining_seconds(0.0))

        elapsed = now_ms - self._state.hold_start_ms
        if elapsed >= self._hold_duration_ms:
            self._state = _IDLE
            return HoldResult(HoldStatus.CONFIRMED, label)

        return HoldResult(HoldStatus.PENDING, label, self._remaining_seconds(elapsed))

    def _remaining_seconds(self, elapsed_ms: float) -> int:
        return max(0, math.ceil((self._hold_duration_ms - elapsed_ms) / 1000.0))
