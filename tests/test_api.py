import asyncio
import threading
import time

import httpx
from conftest import GREY_FRAME, FakeCamera, FakeClock, RED_FRAME
from fastapi.testclient import TestClient

from api.app import create_app
from api.session import ScanSession


def make_client(camera):
    session = ScanSession(camera_factory=lambda: camera, clock=FakeClock(), tick_interval=0)
    return TestClient(create_app(session)), session


def test_health(grey_camera):
    client, _ = make_client(grey_camera)
    assert client.get("/health").json()["status"] == "ok"


def test_categories(grey_camera):
    client, _ = make_client(grey_camera)
    rows = client.get("/categories").json()
    assert {row["label"] for row in rows} == {"Red", "Yellow", "Green", "Blue"}

    blue = client.get("/categories/Blue").json()
    assert blue["level"] == "2.5"
    assert blue["scale_position"] == 15

    assert client.get("/categories/Purple").status_code == 422


def test_result_before_any_scan_is_404(grey_camera):
    client, _ = make_client(grey_camera)
    assert client.get("/scan/status").json()["status"] == "idle"
    assert client.get("/scan/result").status_code == 404


def test_full_scan_flow(red_camera):
    client, session = make_client(red_camera)
    assert client.post("/scan/start").status_code == 200
    assert session.wait(timeout=5.0)

    status = client.get("/scan/status").json()
    assert status["status"] == "complete"
    assert status["current_label"] is None

    result = client.get("/scan/result").json()
    assert result["label"] == "Red"
    assert result["advice"][0] == "หยุดพักทันที 15-20 นาที"

    assert client.post("/scan/reset").status_code == 200
    assert client.get("/scan/result").status_code == 404


def test_scan_conflicts_and_stop(grey_camera):
    session = ScanSession(camera_factory=lambda: grey_camera, tick_interval=0.001)
    client = TestClient(create_app(session))

    assert client.post("/scan/start").status_code == 200
    assert client.post("/scan/start").status_code == 409
    assert client.get("/scan/result").status_code == 409

    status = client.get("/scan/status").json()
    assert status["status"] == "scanning"
    assert status["current_label"] is None

    assert client.post("/scan/stop").json()["status"] == "idle"


def test_failed_scan_reports_500():
    camera = FakeCamera([RED_FRAME], open_ok=False)
    client, session = make_client(camera)
    client.post("/scan/start")
    assert session.wait(timeout=5.0)

    status = client.get("/scan/status").json()
    assert status["status"] == "error"
    assert "Failed to open camera" in status["message"]
    assert client.get("/scan/result").status_code == 500


def test_stop_keeps_event_loop_responsive():
    # release() takes a second, as a real capture thread can
    camera = FakeCamera([GREY_FRAME], release_gate=threading.Event(), release_timeout=1.0)
    session = ScanSession(camera_factory=lambda: camera, tick_interval=0.001)
    app = create_app(session)
    session.start_scan()

    async def stop_while_ticking():
        gaps: list[float] = []
        done = asyncio.Event()

        async def ticker():
            last = time.monotonic()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            task = asyncio.create_task(ticker())
            response = await client.post("/scan/stop")
            done.set()
            await task
        return response, max(gaps, default=0.0)

    response, longest_gap = asyncio.run(stop_while_ticking())
    assert response.json()["status"] == "idle"
    assert camera.released
    assert longest_gap < 0.2
