"""In-memory implementations of the report and business store ports.

Selected with STORE_BACKEND=memory for throwaway runs, and used by the tests.
"""

import itertools
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Set
from uuid import UUID

from ...domain.errors import ReportPersistenceError
from ...domain.models.business import Business
from ...domain.models.geo import Coordinates
from ...domain.models.report import Report
from ...domain.ports.business_store import BusinessStore
from ...domain.ports.report_store import EstablishmentKey, ReportStore, ReportTransaction


class InMemoryReportTransaction(ReportTransaction):
    """Reads a snapshot of committed reports; buffers inserts until commit."""

    def __init__(self, committed: List[Report]):
        self._snapshot = list(committed)
        self.pending: List[Report] = []

    def _in_window(self, since: datetime, until: datetime) -> Iterator[Report]:
        return (report for report in self._snapshot if since <= report.created_at <= until)

    def count_reports_by_reporter(self, reporter_email: str, since: datetime, until: datetime) -> int:
        return sum(1 for report in self._in_window(since, until) if report.reporter_email == reporter_email)

    def distinct_establishments_by_reporter(
        self,
        reporter_email: str,
        since: datetime,
        until: datetime,
    ) -> Set[EstablishmentKey]:
        return {
            report.establishment_key
            for report in self._in_window(since, until)
            if report.reporter_email == reporter_email
        }

    def count_reports_for_establishment(
        self,
        business_name: str,
        business_address: str,
        since: datetime,
        until: datetime,
    ) -> int:
        key = (business_name, business_address)
        return sum(1 for report in self._in_window(since, until) if report.establishment_key == key)

    def add(self, report: Report) -> None:
        self.pending.append(report)


class InMemoryReportStore(ReportStore):
    """Thread-safe report store kept in a list.

    Args:
        business_store: When given, reports linking an unknown business are
            rejected at commit like a foreign key would
    """

    def __init__(self, business_store: Optional[BusinessStore] = None):
        self._reports: Dict[UUID, Report] = {}
        self._lock = threading.Lock()
        self._business_store = business_store

    @contextmanager
    def transaction(self) -> Iterator[InMemoryReportTransaction]:
        with self._lock:
            tx = InMemoryReportTransaction(list(self._reports.values()))
        yield tx
        self._commit(tx.pending)

    def _commit(self, pending: List[Report]) -> None:
        with self._lock:
            seen = set()
            for report in pending:
                if report.id in self._reports or report.id in seen:
                    raise ReportPersistenceError(f"Report {report.id} already exists")
                if (
                    report.business_pk is not None
                    and self._business_store is not None
                    and self._business_store.get_business(report.business_pk) is None
                ):
                    raise ReportPersistenceError(f"Business {report.business_pk} does not exist")
                seen.add(report.id)
            for report in pending:
                self._reports[report.id] = report

    def get_report(self, report_id: UUID) -> Optional[Report]:
        with self._lock:
            return self._reports.get(report_id)

    def all_reports(self) -> List[Report]:
        """Committed reports in insertion order."""
        with self._lock:
            return list(self._reports.values())


class InMemoryBusinessStore(BusinessStore):
    """Business store kept in a dict with auto-incrementing keys."""

    def __init__(self):
        self._businesses: Dict[int, Business] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get_business(self, business_pk: int) -> Optional[Business]:
        with self._lock:
            return self._businesses.get(business_pk)

    def save_coordinates(self, business_pk: int, coords: Coordinates) -> None:
        with self._lock:
            business = self._businesses.get(business_pk)
            if business is None:
                return
            self._businesses[business_pk] = business.model_copy(update={"lat": coords.lat, "lng": coords.lng})

    def add_business(
        self,
        business_name: str,
        business_address: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> Business:
        with self._lock:
            business = Business(
                business_pk=next(self._ids),
                business_name=business_name,
                business_address=business_address,
                lat=lat,
                lng=lng,
            )
            self._businesses[business.business_pk] = business
        return business
