"""Complaint report submission and tracking endpoints."""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...domain.errors import InvalidReportError, ReportPersistenceError
from ...domain.models.geo import Coordinates, DeviceLocation
from ...domain.models.report import CandidateReport
from ...domain.services.intake_service import IntakeService
from ...infrastructure.dependencies import get_intake_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


class LocationPayload(BaseModel):
    """Device location as captured by the browser."""

    model_config = ConfigDict(populate_by_name=True)

    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp_ms: Optional[int] = Field(None, alias="timestampMs")

    def to_device_location(self) -> DeviceLocation:
        captured_at = None
        if self.timestamp_ms is not None:
            captured_at = datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)
        return DeviceLocation(
            lat=self.latitude,
            lng=self.longitude,
            accuracy=self.accuracy,
            captured_at=captured_at,
        )


class PinnedLocationPayload(BaseModel):
    latitude: float
    longitude: float


class ReportSubmissionRequest(BaseModel):
    """Request model for a complaint submission (camelCase or snake_case)."""

    model_config = ConfigDict(populate_by_name=True)

    business_name: str = Field(..., alias="businessName")
    business_address: str = Field(..., alias="businessAddress")
    complaint_description: str = Field(..., alias="complaintDescription")
    reporter_email: str = Field(..., alias="reporterEmail")
    images: List[str] = Field(default_factory=list)
    documents: List[str] = Field(default_factory=list)
    business_pk: Optional[int] = Field(None, alias="businessPk")
    location: Optional[LocationPayload] = None
    pinned_location: Optional[PinnedLocationPayload] = Field(None, alias="pinnedLocation")
    location_verification_tag: Optional[str] = Field(None, alias="locationVerificationTag")
    certification_accepted: bool = Field(False, alias="certificationAccepted")

    def to_candidate(self) -> CandidateReport:
        """Build the domain candidate; raises ValidationError on bad input."""
        pinned = None
        if self.pinned_location is not None:
            pinned = Coordinates(lat=self.pinned_location.latitude, lng=self.pinned_location.longitude)
        return CandidateReport(
            business_name=self.business_name,
            business_address=self.business_address,
            complaint_description=self.complaint_description,
            reporter_email=self.reporter_email,
            image_urls=self.images,
            document_urls=self.documents,
            business_pk=self.business_pk,
            reporter_location=self.location.to_device_location() if self.location else None,
            pinned_location=pinned,
            location_verification_tag=self.location_verification_tag,
            certification_accepted=self.certification_accepted,
        )


class ReportSubmissionResponse(BaseModel):
    """Response model for an accepted complaint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    complaint_id: UUID = Field(..., alias="complaintId")
    tags: List[str]
    authenticity_level: int
    authenticity_tier: str


class TrackingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tracking_id: UUID = Field(..., alias="trackingId")
    status: str


def _validation_detail(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'request'}: {err['msg']}"
        for err in error.errors()
    )


@router.post("", response_model=ReportSubmissionResponse, response_model_by_alias=True)
async def submit_report(
    request: ReportSubmissionRequest,
    intake_service: IntakeService = Depends(get_intake_service),
) -> ReportSubmissionResponse:
    """Accept, classify and store a complaint.

    Raises:
        HTTPException: 422 for invalid input, 500 if the report could not be stored
    """
    try:
        candidate = request.to_candidate()
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e))

    try:
        report = await intake_service.submit_with_verification(candidate)
    except InvalidReportError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ReportPersistenceError as e:
        logger.error(f"❌ Report submission failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to submit complaint")

    return ReportSubmissionResponse(
        message="Complaint submitted successfully",
        complaint_id=report.id,
        tags=sorted(tag.value for tag in report.tags),
        authenticity_level=report.authenticity_level,
        authenticity_tier=report.authenticity_tier.value,
    )


@router.get("/{report_id}/tracking", response_model=TrackingResponse, response_model_by_alias=True)
async def get_tracking(
    report_id: UUID,
    intake_service: IntakeService = Depends(get_intake_service),
) -> TrackingResponse:
    """Get the reporter-facing status of a complaint."""
    summary = intake_service.get_tracking_summary(report_id)
    if summary is None:
        raise HTTPException(status_code=404, detail=f"Complaint {report_id} not found")
    return TrackingResponse(tracking_id=summary.tracking_id, status=summary.status)
