"""
Venue catalogue – holds the partner venues, their courts and hours.

Provides a single place to look up a venue or a court by id.
Initialized once at application startup from the seed catalogue.
"""

from __future__ import annotations

import logging

from app.models import Court, Venue

logger = logging.getLogger(__name__)


class VenueStore:
    """Read-only, in-memory catalogue of venues keyed by id."""

    def __init__(self, venues: list[Venue] | None = None) -> None:
        self._venues: dict[str, Venue] = {}
        self._courts: dict[str, tuple[Venue, Court]] = {}
        if venues:
            self.load(venues)

    def load(self, venues: list[Venue]) -> None:
        """Replace the catalogue."""
        self._venues = {v.id: v for v in venues}
        self._courts = {c.id: (v, c) for v in venues for c in v.courts}
        logger.info("Loaded %d venues with %d courts", len(self._venues), len(self._courts))

    def list_venues(self) -> list[Venue]:
        return list(self._venues.values())

    def get_venue(self, venue_id: str) -> Venue | None:
        return self._venues.get(venue_id)

    def get_court(self, court_id: str) -> tuple[Venue, Court] | None:
        """The court and the venue it belongs to."""
        return self._courts.get(court_id)


# ── Singleton instance ────────────────────────────────────────────────────
venue_store = VenueStore()
