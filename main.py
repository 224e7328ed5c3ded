#!/usr/bin/env python3
"""
Entry point for the Court Booking API server.
"""

import uvicorn

from app.config import API_HOST, API_PORT, API_RELOAD, LOG_LEVEL

if __name__ == "__main__":
    uvicorn.run("app.main:app", host=API_HOST, port=API_PORT, reload=API_RELOAD, log_level=LOG_LEVEL.lower())
