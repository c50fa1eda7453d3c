"""
api/app.py — FastAPI application factory
==========================================
Creates and configures the FastAPI instance.  All configuration is
centralised here so that `main.py` stays minimal.

CORS
----
We allow all origins by default (suitable for a local kiosk or demo).
In a production deployment restrict `allow_origins` to your frontend.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from api.session import ScanSession
from config import API_TITLE, API_VERSION


def create_app(session: ScanSession | None = None) -> FastAPI:
    """
    Construct and return the configured FastAPI application.

    Parameters
    ----------
    session : ScanSession | None
        Scan session served by the routes.  Tests pass one wired to a fake
        camera; by default a webcam-backed session is created.
    """
    app = FastAPI(
        title=API_TITLE,
        version=API_VERSION,
        description=(
            "Hold a coloured card up to the camera for five seconds to get "
            "a stress reading. ⚠️ WELLNESS GAME ONLY — not a medical device."
        ),
    )
    app.state.session = session if session is not None else ScanSession()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],           # Restrict in production!
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app
