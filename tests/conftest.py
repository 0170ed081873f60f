"""Test configuration and common fixtures."""

from datetime import datetime, timedelta

import pytest

from complaint_trust.domain.models.report import CandidateReport, Report
from complaint_trust.infrastructure.persistence.memory_store import (
    InMemoryBusinessStore,
    InMemoryReportStore,
)
from tests.support import NOW, Clock, FakeGeocoder


@pytest.fixture
def business_store() -> InMemoryBusinessStore:
    """Provide an empty business store."""
    return InMemoryBusinessStore()


@pytest.fixture
def report_store(business_store) -> InMemoryReportStore:
    """Provide an empty report store linked to the business store."""
    return InMemoryReportStore(business_store)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    """Provide a geocoder that resolves nothing until told to."""
    return FakeGeocoder()


@pytest.fixture
def clock() -> Clock:
    """Provide a clock fixed at NOW."""
    return Clock()


@pytest.fixture
def make_candidate():
    """Build candidate reports with sensible defaults."""

    def _make(**overrides) -> CandidateReport:
        data = {
            "business_name": "Kusina ni Maria",
            "business_address": "123 Rizal Avenue, Manila",
            "complaint_description": "Food served past its expiry date",
            "reporter_email": "reporter@example.com",
        }
        data.update(overrides)
        return CandidateReport(**data)

    return _make


@pytest.fixture
def seed_reports(report_store):
    """Commit prior reports directly into the report store."""

    def _seed(count: int, created_at: datetime = NOW - timedelta(hours=1), **fields) -> None:
        data = {
            "business_name": "Kusina ni Maria",
            "business_address": "123 Rizal Avenue, Manila",
            "complaint_description": "Earlier complaint",
            "reporter_email": "reporter@example.com",
        }
        data.update(fields)
        with report_store.transaction() as tx:
            for _ in range(count):
                tx.add(Report(created_at=created_at, **data))

    return _seed
