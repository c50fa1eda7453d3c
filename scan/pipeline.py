"""
scan/pipeline.py — Per-tick colour scan pipeline
=================================================
Runs one tick of the scan:

    BGR frame  →  centre pixel  →  classify  →  HoldTracker.observe
               →  TickResult (pending countdown or confirmed label)

The pipeline has no loop and no clock of its own: the host calls
`process_frame()` once per displayed frame with a monotonic timestamp in
milliseconds, and stops calling it once a tick comes back confirmed.
"""

from dataclasses import dataclass

import numpy as np

from vision.classifier import ColorLabel, PixelSample, classify, sample_center_pixel
from tracking.hold import HoldResult, HoldTracker
from config import HOLD_DURATION_MS
from utils.logger import get_logger

logger = get_logger("scan.pipeline")


@dataclass(frozen=True)
class TickResult:
    sample: PixelSample
    label: ColorLabel | None      # This tick's classification
    hold: HoldResult

    @property
    def confirmed(self) -> bool:
        return self.hold.confirmed


class ColorScanPipeline:
    """
    Glue between the classifier and one HoldTracker.

    Parameters
    ----------
    tracker          : HoldTracker | None   Injected tracker (tests); a new
                                            one is created when omitted.
    hold_duration_ms : float                Used only when creating the tracker.
    """

    def __init__(self, tracker: HoldTracker | None = None, hold_duration_ms: float = HOLD_DURATION_MS):
        self._tracker = tracker if tracker is not None else HoldTracker(hold_duration_ms)
        logger.info("ColorScanPipeline created — hold=%.0f ms", self._tracker.hold_duration_ms)

    @property
    def tracker(self) -> HoldTracker:
        return self._tracker

    def process_frame(self, frame: np.ndarray, now_ms: float) -> TickResult:
        """Sample the centre of `frame` and advance the hold.  Raises ValueError on empty frames."""
        return self.process_sample(sample_center_pixel(frame), now_ms)

    def process_sample(self, sample: PixelSample, now_ms: float) -> TickResult:
        previous = self._tracker.state
        label = classify(sample)
        hold = self._tracker.observe(label, now_ms)

        if hold.confirmed:
            logger.info("Confirmed %s after holding %.0f ms", label.value,
                        now_ms - previous.hold_start_ms)
        elif label is not None and label != previous.current_label:
            logger.info("Started holding: %s", label.value)
        elif label is None and not previous.is_idle:
            logger.info("Colour lost — resetting hold on %s", previous.current_label.value)

        return TickResult(sample=sample, label=label, hold=hold)

    def reset(self) -> None:
        """Drop any hold in progress — call between scans."""
        self._tracker.reset()
        logger.debug("Pipeline hold reset.")
