"""
api/routes.py — FastAPI route definitions
==========================================
All HTTP endpoints are defined here and wired into the app via
`app.include_router(router)` in `api/app.py`.

Endpoint summary
----------------
    GET  /health              — Liveness probe
    POST /scan/start          — Enter scanning mode (background tick loop)
    POST /scan/stop           — Leave scanning mode, drop any hold
    GET  /scan/status         — Poll state, held colour and countdown
    GET  /scan/result         — Category record once a colour is confirmed
    POST /scan/reset          — Back to idle, clear the last result
    GET  /categories          — The full colour → stress table
    GET  /categories/{label}  — One row of the table
    GET  /docs                — Auto-generated Swagger UI (FastAPI built-in)

Scan control routes are plain `def`: stopping a scan joins the scan thread
and releases the camera, so FastAPI runs them in its threadpool.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.schemas import CategoryData, ScanResultResponse, StatusResponse
from api.session import ScanSession
from vision.classifier import ColorLabel
from utils.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()


def get_session(request: Request) -> ScanSession:
    """The session created by `create_app()` for this application."""
    return request.app.state.session


# ── Health ────────────────────────────────────────────────────────────────────

@router.get("/health")
async def health():
    """Simple liveness check."""
    return {"status": "ok", "service": "Colour Stress Scan"}


# ── Scan Control ──────────────────────────────────────────────────────────────

@router.post("/scan/start")
def start_scan(session: ScanSession = Depends(get_session)):
    """
    Start scanning.  Hold a coloured card in the centre of the frame for
    five seconds to confirm it.  Returns 409 if a scan is already running.
    """
    if not session.start_scan():
        raise HTTPException(status_code=409, detail="A scan is already in progress.")
    return {
        "status": "scanning",
        "message": "Scan started. Poll GET /scan/status for the countdown.",
    }


@router.post("/scan/stop")
def stop_scan(session: ScanSession = Depends(get_session)):
    """Stop scanning without a result."""
    session.stop_scan()
    return {"status": session.status, "message": "Scan stopped."}


@router.get("/scan/status")
async def scan_status(session: ScanSession = Depends(get_session)) -> StatusResponse:
    """
    Poll the current scan state.

    Returns
    -------
    StatusResponse
        status            : "idle" | "scanning" | "complete" | "error"
        current_label     : colour being held (only while scanning)
        remaining_seconds : countdown until confirmation (only while holding)
        events            : recent scan events, oldest first
    """
    status = session.status
    label = session.current_label
    remaining = session.remaining_seconds

    if status == "scanning" and label is not None:
        scanning_msg = f"Holding {label.value} — {remaining} s left. Keep the colour steady."
    else:
        scanning_msg = "Scanning — hold a coloured card in the centre of the frame."

    messages = {
        "idle":     "No scan in progress. POST /scan/start to begin.",
        "scanning": scanning_msg,
        "complete": "Colour confirmed! Retrieve results via GET /scan/result.",
        "error":    f"Scan failed: {session.error_message}",
    }

    return StatusResponse(
        status=status,
        message=messages.get(status, "Unknown state."),
        current_label=label if status == "scanning" else None,
        remaining_seconds=remaining if status == "scanning" else None,
        events=session.events,
    )


@router.get("/scan/result", response_model=ScanResultResponse)
async def scan_result(session: ScanSession = Depends(get_session)):
    """
    Retrieve the category record for the confirmed colour.

    Returns 409 while scanning, 404 if no scan has completed, or 500 if
    the last scan failed.
    """
    status = session.status

    if status == "scanning":
        raise HTTPException(status_code=409, detail="Scan still in progress.")
    if status == "error":
        raise HTTPException(status_code=500, detail="Scan failed. Reset and try again.")

    result = session.get_result()
    if result is None:
        raise HTTPException(status_code=404, detail="No scan has been completed yet.")

    return result


@router.post("/scan/reset")
def scan_reset(session: ScanSession = Depends(get_session)):
    """Reset the session to idle so a new scan can be started."""
    session.reset()
    return {"status": "ok", "message": "Session reset. Ready for a new scan."}


# ── Category table ────────────────────────────────────────────────────────────

@router.get("/categories", response_model=list[CategoryData])
async def list_categories(session: ScanSession = Depends(get_session)):
    """Every colour the scanner can confirm, with its stress record."""
    return [
        CategoryData.from_record(label, record)
        for label, record in session.categories.items()
    ]


@router.get("/categories/{label}", response_model=CategoryData)
async def get_category(label: ColorLabel, session: ScanSession = Depends(get_session)):
    """One row of the colour → stress table.  404 if the colour has no record."""
    record = session.categories.get(label)
    if record is None:
        logger.warning("Category lookup for unmapped colour %s.", label.value)
        raise HTTPException(status_code=404, detail=f"No category for {label.value}.")
    return CategoryData.from_record(label, record)
