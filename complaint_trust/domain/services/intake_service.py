"""Domain service for accepting, classifying and persisting complaint reports."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from ..errors import InvalidReportError, ProximityFailure, ProximityVerificationError
from ..models.report import (
    DEFAULT_AUTHENTICITY_LEVEL,
    CandidateReport,
    Report,
    TrackingSummary,
    utc_now,
)
from ..models.tags import Tag
from ..ports.report_store import ReportStore, ReportWindowReader
from .proximity_service import ProximityService
from .spam_evaluator import SpamPatternEvaluator
from .tier_classifier import classify_tier

logger = logging.getLogger(__name__)


class IntakeService:
    """Intake pipeline for complaint reports.

    Each submission is one unit of work: the spam rules run first, then the
    tier classifier, against the same in-flight report inside a single store
    transaction. The report content and its classification are committed
    together or not at all.
    """

    def __init__(
        self,
        report_store: ReportStore,
        spam_evaluator: Optional[SpamPatternEvaluator] = None,
        proximity_service: Optional[ProximityService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the service.

        Args:
            report_store: Report persistence port
            spam_evaluator: Spam pattern rules (defaults apply when omitted)
            proximity_service: Used by submit_with_verification (optional)
            clock: Source of report creation instants
        """
        self._store = report_store
        self._spam_evaluator = spam_evaluator or SpamPatternEvaluator()
        self._proximity = proximity_service
        self._clock = clock
        logger.info("🔧 IntakeService initialized")

    def submit(self, candidate: CandidateReport) -> Report:
        """Classify and persist a candidate report.

        Args:
            candidate: Validated submission, optionally carrying a proximity tag

        Returns:
            The persisted report with tags, level and tier

        Raises:
            ReportPersistenceError: If the commit failed; nothing was written
        """
        created_at = self._clock()
        logger.info(f"📝 Accepting report against '{candidate.business_name}' from {candidate.reporter_email}")

        with self._store.transaction() as tx:
            report = self.classify(tx, candidate, created_at)
            tx.add(report)

        logger.info(
            f"✅ Report {report.id} stored: tier={report.authenticity_tier.value}, "
            f"level={report.authenticity_level}, tags={sorted(tag.value for tag in report.tags)}"
        )
        return report

    def classify(self, reader: ReportWindowReader, candidate: CandidateReport, created_at: datetime) -> Report:
        """Build the classified report for a candidate without persisting it.

        Args:
            reader: Window reads over committed reports
            candidate: Submission to classify
            created_at: Creation instant of the report

        Returns:
            Report carrying its final tags, level and tier
        """
        tags = frozenset()
        if candidate.location_verification_tag is not None:
            tags = frozenset({candidate.location_verification_tag})

        spam = self._spam_evaluator.evaluate(
            reader,
            reporter_email=candidate.reporter_email,
            business_name=candidate.business_name,
            business_address=candidate.business_address,
            now=created_at,
            tags=tags,
            score=DEFAULT_AUTHENTICITY_LEVEL,
        )
        tier = classify_tier(spam.tags, spam.score)

        return Report(
            created_at=created_at,
            business_name=candidate.business_name,
            business_address=candidate.business_address,
            complaint_description=candidate.complaint_description,
            reporter_email=candidate.reporter_email,
            image_urls=list(candidate.image_urls),
            document_urls=list(candidate.document_urls),
            business_pk=candidate.business_pk,
            reporter_location=candidate.reporter_location,
            pinned_location=candidate.pinned_location,
            certification_accepted=candidate.certification_accepted,
            certification_accepted_at=created_at if candidate.certification_accepted else None,
            tags=spam.tags,
            authenticity_level=tier.score,
            authenticity_tier=tier.tier,
        )

    async def submit_with_verification(self, candidate: CandidateReport) -> Report:
        """Run proximity verification if needed, then submit.

        Verification runs only when the candidate links a business, carries a
        device location and has no proximity tag yet. An unresolvable
        business or failed geocode attaches ``Failed Location Verification``;
        the report is still stored.

        Raises:
            InvalidReportError: If the verification input is invalid or the
                linked business does not exist
            ReportPersistenceError: If the commit failed
        """
        if self._needs_verification(candidate):
            tag = await self._verify(candidate)
            candidate = candidate.model_copy(update={"location_verification_tag": tag})

        return await asyncio.to_thread(self.submit, candidate)

    def get_tracking_summary(self, report_id: UUID) -> Optional[TrackingSummary]:
        """Get the reporter-facing status of a report."""
        report = self._store.get_report(report_id)
        if report is None:
            return None
        return TrackingSummary(tracking_id=report.id, status=report.status)

    def _needs_verification(self, candidate: CandidateReport) -> bool:
        return (
            self._proximity is not None
            and candidate.location_verification_tag is None
            and candidate.business_pk is not None
            and candidate.reporter_location is not None
        )

    async def _verify(self, candidate: CandidateReport) -> Tag:
        location = candidate.reporter_location
        try:
            result = await self._proximity.verify(
                candidate.business_pk,
                location.lat,
                location.lng,
            )
        except ProximityVerificationError as e:
            if e.reason.is_input_error or e.reason is ProximityFailure.BUSINESS_NOT_FOUND:
                raise InvalidReportError(e.message)
            logger.warning(f"⚠️ Proximity not verified for business {candidate.business_pk}: {e.message}")
            return Tag.FAILED_LOCATION_VERIFICATION
        return result.tag
