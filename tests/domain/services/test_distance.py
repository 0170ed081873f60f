"""Tests for the distance calculator."""

import math

import pytest

from complaint_trust.domain.errors import InvalidCoordinatesError
from complaint_trust.domain.services.distance import haversine_meters, validate_coordinates
from tests.support import BUSINESS_LAT, BUSINESS_LNG, meters_north

MANILA = (14.5995, 120.9842)
CEBU = (10.3157, 123.8854)


def test_identity():
    """Test that the distance from a point to itself is zero."""
    assert haversine_meters(MANILA, MANILA) == 0.0


def test_symmetry():
    """Test that distance does not depend on argument order."""
    assert haversine_meters(MANILA, CEBU) == pytest.approx(haversine_meters(CEBU, MANILA))


def test_known_distance():
    """Test Manila to Cebu against the published great-circle distance."""
    assert haversine_meters(MANILA, CEBU) == pytest.approx(571_000, rel=0.01)


def test_small_offsets():
    """Test accuracy at the scale of the proximity threshold."""
    business = (BUSINESS_LAT, BUSINESS_LNG)
    reporter = (meters_north(BUSINESS_LAT, 150), BUSINESS_LNG)
    assert haversine_meters(business, reporter) == pytest.approx(150, rel=0.01)


def test_near_antipodal_points_are_stable():
    """Test that rounding near antipodes does not produce NaN."""
    half_circumference = math.pi * 6_371_000
    distance = haversine_meters((0.0, 0.0), (0.0, 180.0))
    assert not math.isnan(distance)
    assert distance == pytest.approx(half_circumference)

    nearly = haversine_meters((45.0, 10.0), (-45.0, -170.0000001))
    assert not math.isnan(nearly)
    assert nearly <= half_circumference


def test_validate_accepts_boundaries():
    """Test that range limits are inclusive."""
    assert validate_coordinates(90, 180) == (90.0, 180.0)
    assert validate_coordinates(-90, -180) == (-90.0, -180.0)
    assert validate_coordinates("14.5", "121") == (14.5, 121.0)


@pytest.mark.parametrize(
    "lat,lng",
    [
        (None, 120.0),
        (14.0, None),
        (90.0001, 0.0),
        (0.0, -180.0001),
        (math.nan, 0.0),
        (0.0, math.inf),
        ("north", 0.0),
        (True, 0.0),
        ([], 0.0),
        (10 ** 400, 0.0),
        (0.0, -(10 ** 400)),
    ],
)
def test_validate_rejects_invalid(lat, lng):
    """Test rejection of missing, non-numeric, non-finite and out-of-range values."""
    with pytest.raises(InvalidCoordinatesError):
        validate_coordinates(lat, lng)
