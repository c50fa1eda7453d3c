"""
camera/capture.py — Background webcam capture
==============================================
A daemon thread keeps grabbing frames so the scan loop never blocks on
camera I/O; each tick simply takes whatever frame arrived last.

    with CameraCapture() as camera:
        frame = camera.wait_for_frame(timeout=3.0)

`open()` reports failure by returning False (device missing, permission
denied, already in use) rather than raising; the caller decides how to
surface it to the user.
"""

import threading

import cv2
import numpy as np

from config import CAMERA_INDEX, CAMERA_WIDTH, CAMERA_HEIGHT, CAMERA_FPS
from utils.logger import get_logger

logger = get_logger("camera.capture")


class CameraCapture:
    """One webcam, frames exposed in a thread-safe way."""

    def __init__(
        self,
        device_index: int = CAMERA_INDEX,
        width: int = CAMERA_WIDTH,
        height: int = CAMERA_HEIGHT,
        fps: int = CAMERA_FPS,
    ):
        self._device_index = device_index
        self._size = (width, height)
        self._fps = fps
        self._cap: cv2.VideoCapture | None = None
        self._latest_frame: np.ndarray | None = None
        self._lock = threading.Lock()
        self._frame_ready = threading.Event()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.is_open = False

    def __enter__(self) -> "CameraCapture":
        if not self.open():
            raise RuntimeError(f"Could not open camera at index {self._device_index}.")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    # ── Public API ───────────────────────────────────────────────────────────

    def open(self) -> bool:
        """Open the device and start the capture thread.  True on success."""
        if self.is_open:
            logger.warning("Camera already open — ignoring duplicate open().")
            return True

        self._cap = cv2.VideoCapture(self._device_index)
        # Backends are free to ignore these
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._size[0])
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._size[1])
        self._cap.set(cv2.CAP_PROP_FPS, self._fps)

        if not self._cap.isOpened():
            logger.error(
                "Failed to open camera at index %d. "
                "Check that a webcam is connected and camera access is allowed.",
                self._device_index,
            )
            self._cap.release()
            self._cap = None
            return False

        logger.info(
            "Camera %d opened — %dx%d @ %.1f FPS",
            self._device_index,
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            self._cap.get(cv2.CAP_PROP_FPS),
        )

        self._latest_frame = None
        self._frame_ready.clear()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()
        self.is_open = True
        return True

    def release(self) -> None:
        """Stop the capture thread and free the device.  Safe to call twice."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._thread = None
        if self._cap:
            self._cap.release()
            self._cap = None
            logger.info("Camera released.")
        self.is_open = False

    def get_latest_frame(self) -> np.ndarray | None:
        """Most recent BGR frame, or None before the first one arrives.  Non-blocking."""
        with self._lock:
            return None if self._latest_frame is None else self._latest_frame.copy()

    def wait_for_frame(self, timeout: float = 1.0) -> np.ndarray | None:
        """Block until a new frame arrives or `timeout` seconds elapse."""
        self._frame_ready.wait(timeout=timeout)
        self._frame_ready.clear()
        return self.get_latest_frame()

    # ── Private ──────────────────────────────────────────────────────────────

    def _capture_loop(self) -> None:
        while not self._stop_event.is_set():
            ret, frame = self._cap.read()  # type: ignore[union-attr]
            if not ret:
                logger.warning("Frame grab failed — camera may have been disconnected.")
                break
            with self._lock:
                self._latest_frame = frame
            self._frame_ready.set()
        logger.debug("Capture loop exited.")
