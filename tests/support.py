"""Shared test doubles and helpers."""

import asyncio
import math
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from complaint_trust.domain.models.geo import Coordinates
from complaint_trust.domain.ports.geocoder import Geocoder, GeocodeResult
from complaint_trust.domain.services.distance import EARTH_RADIUS_METERS

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)

BUSINESS_LAT = 14.5995
BUSINESS_LNG = 120.9842


def meters_north(lat: float, meters: float) -> float:
    """Latitude ``meters`` due north of ``lat``."""
    return lat + math.degrees(meters / EARTH_RADIUS_METERS)


class FakeGeocoder(Geocoder):
    """In-process geocoder with canned answers."""

    def __init__(self, results: Optional[Dict[str, Coordinates]] = None, name: str = "fake"):
        self.results = dict(results or {})
        self.calls = []
        self.error: Optional[Exception] = None
        self.delay: float = 0.0
        self._name = name
        self._initialized = False

    async def initialize(self) -> None:
        self._initialized = True

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        self.calls.append(address)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        coords = self.results.get(address)
        if coords is None:
            return None
        return GeocodeResult(coords=coords, formatted_address=address, location_type="ROOFTOP")

    async def shutdown(self) -> None:
        self._initialized = False

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return self._initialized


class Clock:
    """Controllable clock for intake tests."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)
