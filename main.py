#!/usr/bin/env python3
"""
Colour Stress Scan — Main Entry Point
======================================
Launches the FastAPI backend with Uvicorn.
Run with:  python main.py

⚠️  DISCLAIMER: This is a WELLNESS GAME, NOT a medical device.  The
    stress reading is a fixed record keyed by the colour you hold up to
    the camera.  Do NOT use it for any health decision.
"""

import uvicorn

from api.app import create_app
from config import API_HOST, API_PORT

if __name__ == "__main__":
    app = create_app()
    uvicorn.run(
        app,
        host=API_HOST,
        port=API_PORT,
        reload=False,
        log_level="info",
    )
