#!/usr/bin/env python3
"""
demo_cli.py — Standalone command-line demo
============================================
Runs the colour scan WITHOUT the FastAPI server.  Hold a red, yellow,
green or blue card in the centre of the frame for five seconds.

Usage:
    python demo_cli.py --show-feed
    python demo_cli.py --camera 1 --hold-ms 3000

⚠️  DISCLAIMER: The result is a fixed record per colour — NOT a measurement.
"""

import argparse
import sys
import time

import cv2

from camera.capture import CameraCapture
from model.stress import format_advice, lookup_category
from scan.pipeline import ColorScanPipeline, TickResult
from config import CAMERA_INDEX, FIRST_FRAME_TIMEOUT, HOLD_DURATION_MS, TICK_INTERVAL_SECONDS
from utils.logger import get_logger

logger = get_logger("demo_cli")

# BGR colours for the overlay text
_OVERLAY_COLOURS = {
    "Red":    (60, 60, 230),
    "Yellow": (60, 220, 230),
    "Green":  (60, 200, 60),
    "Blue":   (230, 120, 40),
}


def pretty_print(label: str, value, unit: str = "") -> None:
    """Colourised terminal output."""
    print(f"  \033[1;36m{label:<16}\033[0m \033[1;33m{value}\033[0m {unit}")


def draw_overlay(frame, tick: TickResult) -> None:
    """Centre marker, the sampled colour and the hold countdown."""
    h, w = frame.shape[:2]
    cx, cy = w // 2, h // 2
    cv2.drawMarker(frame, (cx, cy), (255, 255, 255), cv2.MARKER_CROSS, 24, 2)

    r, g, b = (int(c) for c in tick.sample)
    cv2.rectangle(frame, (10, h - 50), (50, h - 10), (b, g, r), -1)
    cv2.rectangle(frame, (10, h - 50), (50, h - 10), (255, 255, 255), 1)

    held = tick.hold.label
    if held is None:
        text, colour = "No colour", (200, 200, 200)
    else:
        text = f"{held.value}  {tick.hold.remaining_seconds}s"
        colour = _OVERLAY_COLOURS.get(held.value, (255, 255, 255))
    cv2.putText(frame, text, (60, h - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.8, colour, 2)


def main():
    parser = argparse.ArgumentParser(description="Hold-to-confirm colour stress scan demo")
    parser.add_argument("--camera", type=int, default=CAMERA_INDEX, help="Camera device index")
    parser.add_argument("--hold-ms", type=int, default=HOLD_DURATION_MS,
                        help="How long a colour must be held (ms)")
    parser.add_argument("--show-feed", action="store_true", help="Show live camera feed with overlay")
    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("  COLOUR STRESS SCAN — CLI DEMO")
    print("=" * 60)
    print("  ⚠️  This is a WELLNESS GAME — NOT a medical device.")
    print("=" * 60 + "\n")

    try:
        pipeline = ColorScanPipeline(hold_duration_ms=args.hold_ms)
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(2)

    camera = CameraCapture(device_index=args.camera)
    if not camera.open():
        print("ERROR: Could not open camera. Exiting.")
        sys.exit(1)

    if camera.wait_for_frame(timeout=FIRST_FRAME_TIMEOUT) is None:
        print("ERROR: No frame received from camera. Exiting.")
        camera.release()
        sys.exit(1)

    print(f"  Hold a coloured card in the centre of the frame for {args.hold_ms / 1000:.0f} s.\n")

    confirmed = None
    try:
        while confirmed is None:
            frame = camera.get_latest_frame()
            if frame is None:
                time.sleep(TICK_INTERVAL_SECONDS)
                continue

            tick = pipeline.process_frame(frame, time.monotonic() * 1000.0)
            if tick.confirmed:
                confirmed = tick.hold.label
                break

            if args.show_feed:
                draw_overlay(frame, tick)
                cv2.imshow("Colour Stress Scan", frame)
                if cv2.waitKey(1) & 0xFF == ord("q"):
                    print("\n  Scan cancelled by user.")
                    break
            else:
                time.sleep(TICK_INTERVAL_SECONDS)
    except KeyboardInterrupt:
        print("\n  Scan cancelled by user.")
    finally:
        camera.release()
        if args.show_feed:
            cv2.destroyAllWindows()

    if confirmed is None:
        sys.exit(0)

    record = lookup_category(confirmed)

    print("=" * 60)
    print("  RESULT")
    print("=" * 60)
    pretty_print("Colour", confirmed.value)
    pretty_print("Stress level", record.level, "/ 10")
    pretty_print("Scale", f"{record.scale_position}%")
    print(f"\n    {record.explanation}\n")
    for line in format_advice(record):
        print(f"    {line}")
    print("\n" + "=" * 60 + "\n")


if __name__ == "__main__":
    main()
