import threading

from conftest import GREY_FRAME, RED_FRAME, FakeCamera, FakeClock, ManualClock, wait_until

from api.session import ScanSession
from vision.classifier import ColorLabel


def make_session(camera, **kwargs):
    kwargs.setdefault("clock", FakeClock(step=1.0))
    kwargs.setdefault("tick_interval", 0)
    return ScanSession(camera_factory=lambda: camera, **kwargs)


def test_held_colour_completes_scan(red_camera):
    session = make_session(red_camera)
    assert session.start_scan()
    assert session.wait(timeout=5.0)

    assert session.status == "complete"
    result = session.get_result()
    assert result["label"] == "Red"
    assert result["level"] == "9.2"
    assert result["scale_position"] == 90
    assert red_camera.released
    assert session.current_label is None


def test_events_record_hold_lifecycle():
    camera = FakeCamera([RED_FRAME, GREY_FRAME, RED_FRAME])
    session = make_session(camera)
    session.start_scan()
    assert session.wait(timeout=5.0)

    messages = [line.split("] ", 1)[1] for line in session.events]
    assert messages[0] == "Scan started"
    assert "Color lost - resetting hold" in messages
    assert messages.count("Started holding: Red") == 2
    assert messages[-1] == "Confirmed: Red"


def test_camera_failure_sets_error():
    camera = FakeCamera([RED_FRAME], open_ok=False)
    session = make_session(camera)
    session.start_scan()
    assert session.wait(timeout=5.0)

    assert session.status == "error"
    assert "Failed to open camera" in session.error_message
    assert session.get_result() is None


def test_missing_category_sets_error(red_camera):
    session = make_session(red_camera, categories={})
    session.start_scan()
    assert session.wait(timeout=5.0)
    assert session.status == "error"


def test_stop_scan_returns_to_idle(grey_camera):
    session = make_session(grey_camera, tick_interval=0.001)
    assert session.start_scan()
    assert not session.start_scan()

    session.stop_scan()
    assert session.wait(timeout=5.0)
    assert session.status == "idle"
    assert grey_camera.released
    assert session.events[-1].endswith("Scan stopped")


def test_restart_after_result(red_camera):
    session = make_session(red_camera, hold_duration_ms=2000)
    session.start_scan()
    assert session.wait(timeout=5.0)
    assert session.get_result()["label"] == ColorLabel.RED.value

    assert session.start_scan()
    assert session.get_result() is None
    assert session.wait(timeout=5.0)
    assert session.status == "complete"


def test_reset_clears_result(red_camera):
    session = make_session(red_camera)
    session.start_scan()
    session.wait(timeout=5.0)

    session.reset()
    assert session.status == "idle"
    assert session.get_result() is None


def test_stop_mid_hold_drops_hold_and_restart_counts_down_afresh(red_camera):
    clock = ManualClock(now=0.0)
    session = make_session(red_camera, clock=clock, tick_interval=0.001)

    session.start_scan()
    assert wait_until(lambda: session.current_label is ColorLabel.RED)
    assert session.hold_state.current_label is ColorLabel.RED

    session.stop_scan()
    assert session.hold_state.is_idle

    # Four seconds later the old hold would be nearly done; the new one starts from zero
    clock.now = 4.0
    session.start_scan()
    assert wait_until(lambda: session.current_label is ColorLabel.RED)
    assert session.remaining_seconds == 5
    assert session.status == "scanning"

    session.stop_scan()
    assert session.wait(timeout=5.0)


def test_start_refused_while_previous_thread_still_releasing(monkeypatch):
    monkeypatch.setattr("api.session.THREAD_JOIN_TIMEOUT", 0.05)
    gate = threading.Event()
    camera = FakeCamera([RED_FRAME], release_gate=gate, release_timeout=5.0)
    session = make_session(camera)

    session.start_scan()
    assert wait_until(lambda: session.status == "complete")
    assert not session.start_scan()
    assert session.status == "complete"
    assert session.get_result()["label"] == "Red"

    gate.set()
    assert session.wait(timeout=5.0)
    assert session.start_scan()
    assert session.wait(timeout=5.0)
    assert session.status == "complete"
