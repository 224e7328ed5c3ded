"""Main FastAPI application for the Court Booking API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app import db
from app.config import LOG_LEVEL
from app.mock_data import get_mock_venues
from app.rate_limit import limiter
from app.routers import bookings, commissions, health, venues
from app.services.venue_store import venue_store

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.init_db()
    venue_store.load(get_mock_venues())
    logger.info("Court Booking API started")
    try:
        yield
    finally:
        await db.close_db()


app = FastAPI(
    title="Court Booking API",
    description="Court availability, pricing and cancellation refunds for partner venues",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(health.router)
app.include_router(venues.router)
app.include_router(bookings.router)
app.include_router(commissions.router)
