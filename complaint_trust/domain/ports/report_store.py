"""Port interface for complaint report storage."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Optional, Set, Tuple
from uuid import UUID

from ..models.report import Report

EstablishmentKey = Tuple[str, str]


class ReportWindowReader(ABC):
    """Time-windowed aggregate reads over committed reports.

    Windows are closed intervals ``[since, until]`` on ``created_at``. Only
    reports committed before the reader was opened are visible.
    """

    @abstractmethod
    def count_reports_by_reporter(self, reporter_email: str, since: datetime, until: datetime) -> int:
        """Count reports filed by a (normalized) reporter email within the window."""
        pass

    @abstractmethod
    def distinct_establishments_by_reporter(
        self,
        reporter_email: str,
        since: datetime,
        until: datetime,
    ) -> Set[EstablishmentKey]:
        """Distinct (business name, business address) pairs reported by an email within the window."""
        pass

    @abstractmethod
    def count_reports_for_establishment(
        self,
        business_name: str,
        business_address: str,
        since: datetime,
        until: datetime,
    ) -> int:
        """Count reports filed against an establishment within the window."""
        pass


class ReportTransaction(ReportWindowReader):
    """A unit of work: window reads plus the insert of a classified report.

    Everything added becomes visible atomically when the owning context
    manager exits without error, and is discarded otherwise.
    """

    @abstractmethod
    def add(self, report: Report) -> None:
        """Stage a classified report for commit."""
        pass


class ReportStore(ABC):
    """Abstract interface for report persistence.

    Concrete implementations live in the infrastructure layer
    (SQLAlchemy, in-memory).
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager[ReportTransaction]:
        """Open a transaction.

        Raises:
            ReportPersistenceError: If the commit fails; nothing is written
        """
        pass

    @abstractmethod
    def get_report(self, report_id: UUID) -> Optional[Report]:
        """Get a committed report by id."""
        pass
