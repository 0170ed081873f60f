"""Great-circle distance between coordinate pairs."""

import math
from typing import Optional, Tuple

from ..errors import InvalidCoordinatesError

EARTH_RADIUS_METERS = 6_371_000

LatLng = Tuple[float, float]


def validate_coordinates(lat: Optional[float], lng: Optional[float]) -> LatLng:
    """Check a latitude/longitude pair before it is used in a distance calculation.

    Args:
        lat: Latitude in degrees
        lng: Longitude in degrees

    Returns:
        The pair as floats

    Raises:
        InvalidCoordinatesError: If either value is missing, non-finite or out of range
    """
    if lat is None or lng is None:
        raise InvalidCoordinatesError("Missing coordinates")
    if isinstance(lat, bool) or isinstance(lng, bool):
        raise InvalidCoordinatesError("Coordinates must be numbers")
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError, OverflowError):
        raise InvalidCoordinatesError("Coordinates must be numbers")
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinatesError("Coordinates must be finite")
    if not -90 <= lat <= 90:
        raise InvalidCoordinatesError(f"Latitude out of range: {lat}")
    if not -180 <= lng <= 180:
        raise InvalidCoordinatesError(f"Longitude out of range: {lng}")
    return lat, lng


def haversine_meters(a: LatLng, b: LatLng) -> float:
    """Distance in meters between two ``(lat, lng)`` pairs on a spherical Earth.

    Inputs must already be validated.
    """
    lat1, lng1 = a
    lat2, lng2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push h slightly past 1 near antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))
