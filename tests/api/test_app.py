"""Tests for the FastAPI application."""

import uuid

import pytest
from fastapi.testclient import TestClient

from complaint_trust.api.app import app
from complaint_trust.domain.errors import GeocodingError
from complaint_trust.domain.models.geo import Coordinates
from complaint_trust.domain.services.intake_service import IntakeService
from complaint_trust.domain.services.proximity_service import ProximityService
from complaint_trust.infrastructure.dependencies import (
    get_intake_service,
    get_proximity_service,
    get_service_container,
)
from complaint_trust.infrastructure.geocoding.factory import GeocoderFactory
from tests.support import BUSINESS_LAT, BUSINESS_LNG, meters_north

ADDRESS = "123 Rizal Avenue, Manila"


class StubContainer:
    """Container stand-in exposing only what the health check reads."""

    def __init__(self):
        self.geocoder_factory = GeocoderFactory()


@pytest.fixture
def proximity_service(business_store, geocoder):
    return ProximityService(business_store, geocoder=geocoder, geocode_timeout=0.5)


@pytest.fixture
def intake_service(report_store, proximity_service, clock):
    return IntakeService(report_store, proximity_service=proximity_service, clock=clock)


@pytest.fixture
def client(proximity_service, intake_service):
    """Create a test client with in-memory services."""
    app.dependency_overrides[get_proximity_service] = lambda: proximity_service
    app.dependency_overrides[get_intake_service] = lambda: intake_service
    app.dependency_overrides[get_service_container] = StubContainer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def business(business_store):
    return business_store.add_business("Kusina ni Maria", ADDRESS, lat=BUSINESS_LAT, lng=BUSINESS_LNG)


def submission(**overrides):
    payload = {
        "businessName": "Kusina ni Maria",
        "businessAddress": ADDRESS,
        "complaintDescription": "Food served past its expiry date",
        "reporterEmail": "reporter@example.com",
        "images": ["https://cdn.example.com/receipt.jpg"],
        "certificationAccepted": True,
    }
    payload.update(overrides)
    return payload


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["geocoding_providers"] == {"google": False}


def test_verify_nearby(client, business):
    """Test a verified proximity check."""
    response = client.post(
        "/proximity/verify",
        json={
            "business_pk": business.business_pk,
            "reporter_lat": meters_north(BUSINESS_LAT, 150),
            "reporter_lng": BUSINESS_LNG,
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["tag"] == "Location Verified"
    assert data["distance_meters"] == pytest.approx(150, rel=0.01)
    assert data["threshold_meters"] == 200
    assert isinstance(data["threshold_meters"], int)
    assert data["business_coords"] == {"lat": BUSINESS_LAT, "lng": BUSINESS_LNG}
    assert data["coords_source"] == "registered"
    assert data["business_address"] == ADDRESS


def test_verify_far_away(client, business):
    """Test a failed proximity check is still a successful call."""
    response = client.post(
        "/proximity/verify",
        json={
            "business_pk": business.business_pk,
            "reporter_lat": meters_north(BUSINESS_LAT, 250),
            "reporter_lng": BUSINESS_LNG,
        },
    )
    assert response.status_code == 200
    assert response.json()["tag"] == "Failed Location Verification"


@pytest.mark.parametrize(
    "payload,reason",
    [
        ({"reporter_lat": 14.6, "reporter_lng": 120.98}, "missing_input"),
        ({"business_pk": 1, "reporter_lng": 120.98}, "missing_input"),
        ({"business_pk": 1, "reporter_lat": 95, "reporter_lng": 120.98}, "invalid_coordinates"),
        ({"business_pk": 1, "reporter_lat": "north", "reporter_lng": 120.98}, "invalid_coordinates"),
        ({"business_pk": 1, "reporter_lat": 14.6, "reporter_lng": 120.98, "threshold_meters": 0}, "invalid_threshold"),
        ({"business_pk": 1, "reporter_lat": 10 ** 400, "reporter_lng": 120.98}, "invalid_coordinates"),
        ({"business_pk": 1, "reporter_lat": 14.6, "reporter_lng": 120.98, "threshold_meters": "NaN"}, "invalid_threshold"),
        ({"business_pk": 1, "reporter_lat": 14.6, "reporter_lng": 120.98, "threshold_meters": "Infinity"}, "invalid_threshold"),
    ],
)
def test_verify_bad_input(client, business, payload, reason):
    """Test input errors map to 400."""
    response = client.post("/proximity/verify", json=payload)
    assert response.status_code == 400
    data = response.json()
    assert data["ok"] is False
    assert data["reason"] == reason
    assert data["error"]


@pytest.mark.parametrize(
    "body",
    [
        '{"business_pk": 1, "reporter_lat": 14.6, "reporter_lng": 120.98, "threshold_meters": NaN}',
        '{"business_pk": 1, "reporter_lat": 14.6, "reporter_lng": 120.98, "threshold_meters": Infinity}',
        '{"business_pk": 1, "reporter_lat": 14.6, "reporter_lng": 120.98, "threshold_meters": 1e400}',
    ],
)
def test_verify_non_finite_threshold(client, business, body):
    """Test that non-finite JSON thresholds are rejected."""
    response = client.post("/proximity/verify", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {
        "ok": False,
        "error": "threshold_meters must be a positive finite number",
        "reason": "invalid_threshold",
    }


def test_verify_unknown_business(client):
    """Test an unknown business maps to 404."""
    response = client.post(
        "/proximity/verify", json={"business_pk": 999, "reporter_lat": 14.6, "reporter_lng": 120.98}
    )
    assert response.status_code == 404
    assert response.json()["reason"] == "business_not_found"


def test_verify_unresolvable_address(client, business_store):
    """Test an address without geocoding results maps to 422."""
    business = business_store.add_business("Kusina ni Maria", ADDRESS)
    response = client.post(
        "/proximity/verify",
        json={"business_pk": business.business_pk, "reporter_lat": 14.6, "reporter_lng": 120.98},
    )
    assert response.status_code == 422
    assert response.json()["reason"] == "address_unresolvable"


def test_verify_geocoding_failure(client, business_store, geocoder):
    """Test a provider failure maps to 502."""
    geocoder.error = GeocodingError("OVER_QUERY_LIMIT")
    business = business_store.add_business("Kusina ni Maria", ADDRESS)
    response = client.post(
        "/proximity/verify",
        json={"business_pk": business.business_pk, "reporter_lat": 14.6, "reporter_lng": 120.98},
    )
    assert response.status_code == 502
    assert response.json()["reason"] == "geocoding_failed"


def test_verify_geocoded_address(client, business_store, geocoder):
    """Test verification against a geocoded address."""
    geocoder.results[ADDRESS] = Coordinates(lat=BUSINESS_LAT, lng=BUSINESS_LNG)
    business = business_store.add_business("Kusina ni Maria", ADDRESS)
    response = client.post(
        "/proximity/verify",
        json={"business_pk": business.business_pk, "reporter_lat": BUSINESS_LAT, "reporter_lng": BUSINESS_LNG},
    )
    assert response.status_code == 200
    assert response.json()["coords_source"] == "geocoded"


def test_submit_report(client, report_store):
    """Test a plain complaint submission."""
    response = client.post("/reports", json=submission())
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["tags"] == []
    assert data["authenticity_level"] == 100
    assert data["authenticity_tier"] == "Medium"

    stored = report_store.get_report(uuid.UUID(data["complaintId"]))
    assert stored.image_urls == ["https://cdn.example.com/receipt.jpg"]
    assert stored.certification_accepted_at is not None


def test_submit_report_snake_case(client):
    """Test that snake_case field names are accepted too."""
    payload = {
        "business_name": "Kusina ni Maria",
        "business_address": ADDRESS,
        "complaint_description": "Cockroach in soup",
        "reporter_email": "reporter@example.com",
    }
    response = client.post("/reports", json=payload)
    assert response.status_code == 200


def test_submit_with_location(client, business, report_store):
    """Test submission with a device location runs verification."""
    response = client.post(
        "/reports",
        json=submission(
            businessPk=business.business_pk,
            location={
                "latitude": meters_north(BUSINESS_LAT, 20),
                "longitude": BUSINESS_LNG,
                "accuracy": 15,
                "timestampMs": 1773489600000,
            },
            pinnedLocation={"latitude": BUSINESS_LAT, "longitude": BUSINESS_LNG},
        ),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["tags"] == ["Location Verified"]

    stored = report_store.get_report(uuid.UUID(data["complaintId"]))
    assert stored.reporter_location.captured_at.year == 2026
    assert stored.pinned_location == Coordinates(lat=BUSINESS_LAT, lng=BUSINESS_LNG)


def test_submit_with_unresolvable_business(client, business_store):
    """Test that a failed verification still stores the complaint as Low."""
    business = business_store.add_business("Kusina ni Maria", "Somewhere nobody can find")
    response = client.post(
        "/reports",
        json=submission(businessPk=business.business_pk, location={"latitude": 14.6, "longitude": 120.98}),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["tags"] == ["Failed Location Verification"]
    assert data["authenticity_tier"] == "Low"
    assert data["authenticity_level"] <= 25


def test_submit_with_client_tag(client):
    """Test a client-supplied proximity tag."""
    response = client.post("/reports", json=submission(locationVerificationTag="Failed Location Verification"))
    assert response.status_code == 200
    assert response.json()["authenticity_tier"] == "Low"


@pytest.mark.parametrize(
    "overrides",
    [
        {"reporterEmail": "not-an-email"},
        {"businessName": "  "},
        {"locationVerificationTag": "Credible Reporter"},
        {"location": {"latitude": 200, "longitude": 0}},
    ],
)
def test_submit_invalid(client, report_store, overrides):
    """Test that invalid submissions are rejected and nothing is stored."""
    response = client.post("/reports", json=submission(**overrides))
    assert response.status_code == 422
    assert report_store.all_reports() == []


def test_submit_unknown_business(client, report_store):
    """Test linking a business that does not exist."""
    response = client.post(
        "/reports",
        json=submission(businessPk=999, location={"latitude": 14.6, "longitude": 120.98}),
    )
    assert response.status_code == 422
    assert report_store.all_reports() == []


def test_submit_persistence_failure(client, report_store):
    """Test that storage failures return 500."""
    response = client.post("/reports", json=submission(businessPk=999))
    assert response.status_code == 500
    assert report_store.all_reports() == []


def test_tracking(client):
    """Test the tracking lookup."""
    complaint_id = client.post("/reports", json=submission()).json()["complaintId"]

    response = client.get(f"/reports/{complaint_id}/tracking")
    assert response.status_code == 200
    assert response.json() == {"trackingId": complaint_id, "status": "Submitted"}

    assert client.get(f"/reports/{uuid.uuid4()}/tracking").status_code == 404
