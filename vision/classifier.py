"""
vision/classifier.py — Centre-pixel colour classification
==========================================================
Turns one RGB pixel into one of four colour labels (or None):

    PixelSample (R, G, B)  →  HSL  →  saturation / lightness gate
                           →  hue band  →  ColorLabel | None

Why HSL?
--------
Hue separates the chromatic angle from brightness, so a red card reads as
red under dim and bright light alike.  Saturation and lightness are only
used as a gate: near-grey, near-black and near-white samples carry no
reliable hue and are rejected outright.

Hue bands
---------
    Red     [0, 15)  ∪  (330, 360]
    Yellow  [45, 75)
    Green   [90, 160)
    Blue    [180, 260)

Hues between the bands map to None, even at full saturation.

Out-of-range input
------------------
Channel values outside [0, 255] are clamped before conversion, so
`classify()` is total over any numeric input and never raises.
"""

from enum import Enum
from typing import NamedTuple

import numpy as np

from config import (
    MIN_SATURATION,
    MIN_LIGHTNESS,
    MAX_LIGHTNESS,
    RED_HUE_BAND,
    RED_WRAP_HUE,
    YELLOW_HUE_BAND,
    GREEN_HUE_BAND,
    BLUE_HUE_BAND,
)


class ColorLabel(str, Enum):
    """The four colours the scanner can confirm."""
    RED = "Red"
    YELLOW = "Yellow"
    GREEN = "Green"
    BLUE = "Blue"


class PixelSample(NamedTuple):
    """One RGB pixel, 8 bits per channel."""
    red: float
    green: float
    blue: float


class HSL(NamedTuple):
    """Hue in degrees, saturation and lightness in percent."""
    hue: float          # degrees, [0, 360)
    saturation: float   # percent, [0, 100]
    lightness: float    # percent, [0, 100]


# Checked in order; the first band containing the hue wins
_HUE_BANDS: list[tuple[ColorLabel, tuple[float, float]]] = [
    (ColorLabel.RED, RED_HUE_BAND),
    (ColorLabel.YELLOW, YELLOW_HUE_BAND),
    (ColorLabel.GREEN, GREEN_HUE_BAND),
    (ColorLabel.BLUE, BLUE_HUE_BAND),
]


def _clamp_channel(value: float) -> float:
    return min(max(float(value), 0.0), 255.0)


def clamp_sample(sample: PixelSample) -> PixelSample:
    """Force every channel into [0, 255]."""
    return PixelSample(*(_clamp_channel(v) for v in sample))


def rgb_to_hsl(sample: PixelSample) -> HSL:
    """
    Standard RGB → HSL conversion.

    Parameters
    ----------
    sample : PixelSample   Channels in [0, 255].

    Returns
    -------
    HSL with hue in degrees [0, 360) and saturation / lightness in percent.
    A grey sample (all channels equal) has hue 0 and saturation 0.
    """
    r, g, b = (channel / 255.0 for channel in sample)
    mx = max(r, g, b)
    mn = min(r, g, b)
    lightness = (mx + mn) / 2.0

    if mx == mn:
        return HSL(0.0, 0.0, lightness * 100.0)

    d = mx - mn
    if lightness > 0.5:
        saturation = d / (2.0 - mx - mn)
    else:
        saturation = d / (mx + mn)

    # Piecewise ratio in [0, 6), one sextant per 60°
    if mx == r:
        hue = (g - b) / d + (6.0 if g < b else 0.0)
    elif mx == g:
        hue = (b - r) / d + 2.0
    else:
        hue = (r - g) / d + 4.0
    hue = (hue / 6.0 * 360.0) % 360.0

    return HSL(hue, saturation * 100.0, lightness * 100.0)


def classify_hsl(hsl: HSL) -> ColorLabel | None:
    """Apply the saturation / lightness gate, then map hue to a label."""
    hue, saturation, lightness = hsl
    if saturation < MIN_SATURATION or lightness < MIN_LIGHTNESS or lightness > MAX_LIGHTNESS:
        return None

    if RED_WRAP_HUE < hue <= 360.0:
        return ColorLabel.RED
    for label, (low, high) in _HUE_BANDS:
        if low <= hue < high:
            return label
    return None


def classify(sample: PixelSample) -> ColorLabel | None:
    """
    Classify one pixel.  Pure and deterministic.

    Returns None when the sample is too grey, too dark, too bright, or its
    hue falls between the bands.
    """
    return classify_hsl(rgb_to_hsl(clamp_sample(sample)))


def sample_center_pixel(frame: np.ndarray) -> PixelSample:
    """
    Read the centre pixel of a BGR frame (OpenCV channel order) as RGB.

    Raises
    ------
    ValueError
        If the frame is empty or is not a 3-channel image.
    """
    if frame is None or frame.size == 0:
        raise ValueError("Cannot sample an empty frame.")
    if frame.ndim != 3 or frame.shape[2] < 3:
        raise ValueError(f"Expected an HxWx3 BGR frame, got shape {frame.shape}.")

    h, w = frame.shape[:2]
    b, g, r = frame[h // 2, w // 2, :3]
    return PixelSample(int(r), int(g), int(b))
