"""
api/session.py — Scan Session Manager
=======================================
Owns the camera and the colour-scan pipeline and drives the tick loop in a
background thread while the session is in scanning mode.  The FastAPI
routes start and stop scans, poll the countdown, and fetch the result.

Thread safety
-------------
Everything read by the request handlers and written by the scan thread
(`status`, current label, countdown, result, event log) is protected by
`_lock`.  The pipeline itself is only touched by the scan thread, and by
`start_scan()` / `stop_scan()` while no scan thread is running.

Lifecycle
---------
    1. `start_scan()` — fresh hold, camera opened, ticks start.
    2. Poll `status` / `remaining_seconds` from the client.
    3. On confirmation the category record is stored, the loop stops and
       the camera is released; `status == "complete"`.
    4. `stop_scan()` aborts a running scan; `reset()` also clears the result.
"""

import threading
import time
from collections import deque
from datetime import datetime
from typing import Callable, Mapping

from camera.capture import CameraCapture
from model.stress import STRESS_CATEGORIES, CategoryRecord, lookup_category
from scan.pipeline import ColorScanPipeline, TickResult
from tracking.hold import HoldState
from vision.classifier import ColorLabel
from config import (
    EVENT_LOG_SIZE,
    FIRST_FRAME_TIMEOUT,
    HOLD_DURATION_MS,
    THREAD_JOIN_TIMEOUT,
    TICK_INTERVAL_SECONDS,
)
from utils.logger import get_logger

logger = get_logger("api.session")

DISCLAIMER = (
    "⚠️ This is a WELLNESS GAME — NOT a medical device. "
    "The result is a fixed record looked up from the colour you held up "
    "to the camera; no physiological signal is measured."
)


class ScanSession:
    """
    Manages hold-to-confirm colour scans.  Instantiate once and reuse.

    Parameters
    ----------
    camera_factory   : callable   Returns an object with the CameraCapture
                                  interface (open / wait_for_frame /
                                  get_latest_frame / release).
    categories       : mapping    ColorLabel → CategoryRecord lookup table.
    clock            : callable   Monotonic clock in seconds.
    tick_interval    : float      Pause between ticks (seconds).
    hold_duration_ms : float      How long a colour must be held.
    """

    def __init__(
        self,
        camera_factory: Callable[[], CameraCapture] = CameraCapture,
        categories: Mapping[ColorLabel, CategoryRecord] = STRESS_CATEGORIES,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        hold_duration_ms: float = HOLD_DURATION_MS,
    ):
        self._camera_factory = camera_factory
        self._categories = categories
        self._clock = clock
        self._tick_interval = tick_interval
        self._pipeline = ColorScanPipeline(hold_duration_ms=hold_duration_ms)

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

        # State
        self._status = "idle"            # idle | scanning | complete | error
        self._current_label: ColorLabel | None = None
        self._remaining_seconds: int | None = None
        self._error_message = ""
        self._result: dict | None = None
        self._events: deque[str] = deque(maxlen=EVENT_LOG_SIZE)

        logger.info("ScanSession initialised.")

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def status(self) -> str:
        with self._lock:
            return self._status

    @property
    def current_label(self) -> ColorLabel | None:
        with self._lock:
            return self._current_label

    @property
    def remaining_seconds(self) -> int | None:
        with self._lock:
            return self._remaining_seconds

    @property
    def error_message(self) -> str:
        with self._lock:
            return self._error_message

    @property
    def events(self) -> list[str]:
        with self._lock:
            return list(self._events)

    @property
    def hold_state(self) -> HoldState:
        """Snapshot of the hold tracker."""
        return self._pipeline.tracker.state

    @property
    def categories(self) -> Mapping[ColorLabel, CategoryRecord]:
        return self._categories

    def get_result(self) -> dict | None:
        with self._lock:
            return self._result

    def start_scan(self) -> bool:
        """
        Launch the tick loop.

        False if a scan is already running, or if the previous scan thread
        is still releasing its camera after `THREAD_JOIN_TIMEOUT`.
        """
        if self.status == "scanning":
            logger.warning("Scan already in progress.")
            return False

        # A finished scan thread may still be releasing its camera
        if not self._join():
            logger.error("Previous scan thread is still running — not starting a new scan.")
            return False

        with self._lock:
            if self._status == "scanning":
                logger.warning("Scan already in progress.")
                return False
            self._status = "scanning"
            self._current_label = None
            self._remaining_seconds = None
            self._result = None
            self._error_message = ""

        self._pipeline.reset()
        self._stop_event.clear()
        self._log_event("Scan started")

        self._thread = threading.Thread(target=self._run_scan, daemon=True)
        self._thread.start()
        return True

    def stop_scan(self) -> None:
        """Stop driving ticks and drop any hold in progress."""
        self._stop_event.set()
        self._join()
        self._pipeline.reset()
        with self._lock:
            was_scanning = self._status == "scanning"
            if was_scanning:
                self._status = "idle"
            self._current_label = None
            self._remaining_seconds = None
        if was_scanning:
            self._log_event("Scan stopped")

    def reset(self) -> None:
        """Stop any scan and clear the previous result."""
        self.stop_scan()
        with self._lock:
            self._status = "idle"
            self._result = None
            self._error_message = ""
        logger.info("Session reset.")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the scan thread exits.  True if it is no longer running."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout=timeout)
        return not thread.is_alive()

    # ── Private: scan loop ─────────────────────────────────────────────────

    def _run_scan(self) -> None:
        camera = self._camera_factory()
        try:
            if not camera.open():
                self._set_error("Failed to open camera. Check camera permissions.")
                return

            if camera.wait_for_frame(timeout=FIRST_FRAME_TIMEOUT) is None:
                self._set_error("No frame received from camera.")
                return

            started = self._clock()
            while not self._stop_event.is_set():
                frame = camera.get_latest_frame()
                if frame is None:
                    self._stop_event.wait(self._tick_interval)
                    continue

                tick = self._pipeline.process_frame(frame, self._clock() * 1000.0)
                if tick.confirmed:
                    self._finalize(tick, self._clock() - started)
                    return
                self._update_countdown(tick)

                self._stop_event.wait(self._tick_interval)

        except ValueError as e:
            self._set_error(f"Frame processing error: {e}")
        except Exception as e:
            self._set_error(f"Unexpected error during scan: {e}")
            logger.exception("Scan failed with exception:")
        finally:
            camera.release()

    def _update_countdown(self, tick: TickResult) -> None:
        held = tick.hold.label
        with self._lock:
            previous = self._current_label
            self._current_label = held
            self._remaining_seconds = tick.hold.remaining_seconds
        if held is not None and held != previous:
            self._log_event(f"Started holding: {held.value}")
        elif held is None and previous is not None:
            self._log_event("Color lost - resetting hold")

    def _finalize(self, tick: TickResult, elapsed_seconds: float) -> None:
        label = tick.hold.label
        try:
            record = lookup_category(label, self._categories)
        except KeyError:
            self._set_error(f"No category record for {label.value}.")
            return

        result = {
            "disclaimer": DISCLAIMER,
            "label": label.value,
            "level": record.level,
            "explanation": record.explanation,
            "advice": list(record.advice),
            "scale_position": record.scale_position,
            "scan_duration_seconds": round(elapsed_seconds, 1),
        }
        with self._lock:
            self._status = "complete"
            self._current_label = None
            self._remaining_seconds = None
            self._result = result
        self._log_event(f"Confirmed: {label.value}")
        logger.info("Scan complete. Colour=%s, level=%s", label.value, record.level)

    def _join(self) -> bool:
        """Wait for the scan thread.  True once no scan thread is running."""
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout=THREAD_JOIN_TIMEOUT)
        if thread.is_alive():
            logger.warning("Scan thread did not exit within %.1f s.", THREAD_JOIN_TIMEOUT)
            return False
        return True

    def _log_event(self, message: str) -> None:
        line = f"[{datetime.now().strftime('%H:%M:%S')}] {message}"
        with self._lock:
            self._events.append(line)

    def _set_error(self, message: str) -> None:
        with self._lock:
            self._status = "error"
            self._error_message = message
            self._current_label = None
            self._remaining_seconds = None
        self._log_event(f"ERROR: {message}")
        logger.error("Scan error: %s", message)
