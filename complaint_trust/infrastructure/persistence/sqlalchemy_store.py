"""SQLAlchemy implementations of the report and business store ports."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional, Set
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ...domain.errors import ReportPersistenceError
from ...domain.models.business import Business
from ...domain.models.geo import Coordinates
from ...domain.models.report import Report
from ...domain.ports.business_store import BusinessStore
from ...domain.ports.report_store import EstablishmentKey, ReportStore, ReportTransaction
from .orm_models import BusinessRecord, ReportRecord, to_storage_time

logger = logging.getLogger(__name__)


class SQLAlchemyReportTransaction(ReportTransaction):
    """Window reads and report inserts bound to one session."""

    def __init__(self, session: Session):
        self._session = session

    def count_reports_by_reporter(self, reporter_email: str, since: datetime, until: datetime) -> int:
        stmt = select(func.count()).select_from(ReportRecord).where(
            ReportRecord.reporter_email == reporter_email,
            ReportRecord.created_at.between(to_storage_time(since), to_storage_time(until)),
        )
        return self._session.scalar(stmt) or 0

    def distinct_establishments_by_reporter(
        self,
        reporter_email: str,
        since: datetime,
        until: datetime,
    ) -> Set[EstablishmentKey]:
        stmt = (
            select(ReportRecord.business_name, ReportRecord.business_address)
            .where(
                ReportRecord.reporter_email == reporter_email,
                ReportRecord.created_at.between(to_storage_time(since), to_storage_time(until)),
            )
            .distinct()
        )
        return {(name, address) for name, address in self._session.execute(stmt)}

    def count_reports_for_establishment(
        self,
        business_name: str,
        business_address: str,
        since: datetime,
        until: datetime,
    ) -> int:
        stmt = select(func.count()).select_from(ReportRecord).where(
            ReportRecord.business_name == business_name,
            ReportRecord.business_address == business_address,
            ReportRecord.created_at.between(to_storage_time(since), to_storage_time(until)),
        )
        return self._session.scalar(stmt) or 0

    def add(self, report: Report) -> None:
        self._session.add(ReportRecord.from_domain(report))


class SQLAlchemyReportStore(ReportStore):
    """Report store backed by a relational database."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def transaction(self) -> Iterator[SQLAlchemyReportTransaction]:
        session = self._session_factory()
        try:
            yield SQLAlchemyReportTransaction(session)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"❌ Report transaction rolled back: {e}")
            raise ReportPersistenceError(f"Failed to store report: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_report(self, report_id: UUID) -> Optional[Report]:
        try:
            with self._session_factory() as session:
                record = session.get(ReportRecord, report_id)
                return record.to_domain() if record else None
        except SQLAlchemyError as e:
            raise ReportPersistenceError(f"Failed to load report {report_id}: {e}") from e


class SQLAlchemyBusinessStore(BusinessStore):
    """Business store backed by a relational database."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_business(self, business_pk: int) -> Optional[Business]:
        with self._session_factory() as session:
            record = session.get(BusinessRecord, business_pk)
            return record.to_domain() if record else None

    def save_coordinates(self, business_pk: int, coords: Coordinates) -> None:
        with self._session_factory() as session:
            session.execute(
                update(BusinessRecord)
                .where(BusinessRecord.business_pk == business_pk)
                .values(lat=coords.lat, lng=coords.lng)
            )
            session.commit()

    def add_business(
        self,
        business_name: str,
        business_address: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> Business:
        with self._session_factory() as session:
            record = BusinessRecord(
                business_name=business_name,
                business_address=business_address,
                lat=lat,
                lng=lng,
            )
            session.add(record)
            session.commit()
            return record.to_domain()
