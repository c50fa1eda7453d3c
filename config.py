"""
config.py — Centralised configuration & thresholds
====================================================
Every tunable constant in the project lives here so that the rest of the
codebase can import from a single source of truth.
"""

import logging

# ─── Camera ──────────────────────────────────────────────────────────────────
CAMERA_INDEX: int = 0          # Device index passed to cv2.VideoCapture
CAMERA_WIDTH: int = 640
CAMERA_HEIGHT: int = 480
CAMERA_FPS: int = 30           # Requested FPS; actual FPS may differ
FIRST_FRAME_TIMEOUT: float = 3.0   # Seconds to wait for the first frame

# ─── Hold-to-confirm ─────────────────────────────────────────────────────────
# A colour must be seen continuously for this long before it is accepted.
HOLD_DURATION_MS: int = 5000

# Delay between two ticks of the scan loop (seconds).  ~30 ticks/s keeps
# pace with the camera without busy-spinning.
TICK_INTERVAL_SECONDS: float = 1 / 30

# ─── Colour classification ───────────────────────────────────────────────────
# Samples outside these limits carry no reliable hue and are rejected.
MIN_SATURATION: float = 20.0   # Below → near-grey
MIN_LIGHTNESS: float = 15.0    # Below → near-black
MAX_LIGHTNESS: float = 90.0    # Above → near-white

# Hue bands in degrees, lower bound inclusive, upper bound exclusive.
# Red additionally wraps around: (RED_WRAP_HUE, 360] is also red.
# Hues between the bands (15–45, 75–90, 160–180, 260–330) are unmapped.
RED_HUE_BAND: tuple[float, float] = (0.0, 15.0)
RED_WRAP_HUE: float = 330.0
YELLOW_HUE_BAND: tuple[float, float] = (45.0, 75.0)
GREEN_HUE_BAND: tuple[float, float] = (90.0, 160.0)
BLUE_HUE_BAND: tuple[float, float] = (180.0, 260.0)

# ─── Session ─────────────────────────────────────────────────────────────────
EVENT_LOG_SIZE: int = 50       # Debug events kept per scan session
THREAD_JOIN_TIMEOUT: float = 2.0   # Seconds to wait for a scan thread to exit

# ─── Logging ─────────────────────────────────────────────────────────────────
LOG_LEVEL: int = logging.INFO

# ─── API ─────────────────────────────────────────────────────────────────────
API_TITLE = "Colour Stress Scan API"
API_VERSION = "0.1.0"
API_HOST = "0.0.0.0"
API_PORT = 8000
