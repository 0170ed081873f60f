"""SQLAlchemy models for businesses and complaint reports."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...domain.models.business import Business
from ...domain.models.geo import Coordinates, DeviceLocation
from ...domain.models.report import AuthenticityTier, Report
from ...domain.models.tags import parse_tags, serialize_tags
from .database import Base


def to_storage_time(value: Optional[datetime]) -> Optional[datetime]:
    """Naive UTC datetime, the form timestamps are stored and compared in."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def from_storage_time(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC datetime from a stored naive timestamp."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BusinessRecord(Base):
    """A registered business."""

    __tablename__ = "businesses"
    __table_args__ = (
        CheckConstraint("lat IS NULL OR (lat >= -90 AND lat <= 90)", name="businesses_lat_range_chk"),
        CheckConstraint("lng IS NULL OR (lng >= -180 AND lng <= 180)", name="businesses_lng_range_chk"),
    )

    business_pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    business_address: Mapped[str | None] = mapped_column(Text)
    lat: Mapped[float | None] = mapped_column(Float)
    lng: Mapped[float | None] = mapped_column(Float)

    def to_domain(self) -> Business:
        return Business(
            business_pk=self.business_pk,
            business_name=self.business_name,
            business_address=self.business_address,
            lat=self.lat,
            lng=self.lng,
        )

    def __repr__(self) -> str:
        return f"<Business {self.business_pk}: {self.business_name}>"


class ReportRecord(Base):
    """A classified complaint report."""

    __tablename__ = "complaints"
    __table_args__ = (
        CheckConstraint(
            "authenticity_level >= 0 AND authenticity_level <= 100",
            name="authenticity_level_range_chk",
        ),
        CheckConstraint(
            "authenticity_tier IN ('Low', 'Medium', 'High')",
            name="authenticity_tier_chk",
        ),
        Index("idx_complaints_email_created_at", "reporter_email", "created_at"),
        Index(
            "idx_complaints_establishment_created_at",
            "business_name",
            "business_address",
            "created_at",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_address: Mapped[str] = mapped_column(Text, nullable=False)
    complaint_description: Mapped[str] = mapped_column(Text, nullable=False)
    reporter_email: Mapped[str] = mapped_column(String(255), nullable=False)
    image_urls: Mapped[list] = mapped_column(JSON, default=list)
    document_urls: Mapped[list] = mapped_column(JSON, default=list)

    authenticity_level: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    authenticity_tier: Mapped[str] = mapped_column(String(10), nullable=False, default="Medium")
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Submitted")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Location-based authenticity
    business_pk: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("businesses.business_pk", ondelete="SET NULL"), index=True
    )
    reporter_lat: Mapped[float | None] = mapped_column(Float)
    reporter_lng: Mapped[float | None] = mapped_column(Float)
    reporter_accuracy: Mapped[float | None] = mapped_column(Float)
    reporter_location_timestamp: Mapped[datetime | None] = mapped_column(DateTime)
    reporter_pin_lat: Mapped[float | None] = mapped_column(Float)
    reporter_pin_lng: Mapped[float | None] = mapped_column(Float)

    certification_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    certification_accepted_at: Mapped[datetime | None] = mapped_column(DateTime)

    @classmethod
    def from_domain(cls, report: Report) -> "ReportRecord":
        location = report.reporter_location
        pin = report.pinned_location
        return cls(
            id=report.id,
            business_name=report.business_name,
            business_address=report.business_address,
            complaint_description=report.complaint_description,
            reporter_email=report.reporter_email,
            image_urls=list(report.image_urls),
            document_urls=list(report.document_urls),
            authenticity_level=report.authenticity_level,
            authenticity_tier=report.authenticity_tier.value,
            tags=serialize_tags(report.tags),
            status=report.status,
            created_at=to_storage_time(report.created_at),
            business_pk=report.business_pk,
            reporter_lat=location.lat if location else None,
            reporter_lng=location.lng if location else None,
            reporter_accuracy=location.accuracy if location else None,
            reporter_location_timestamp=to_storage_time(location.captured_at) if location else None,
            reporter_pin_lat=pin.lat if pin else None,
            reporter_pin_lng=pin.lng if pin else None,
            certification_accepted=report.certification_accepted,
            certification_accepted_at=to_storage_time(report.certification_accepted_at),
        )

    def to_domain(self) -> Report:
        location: Optional[DeviceLocation] = None
        if self.reporter_lat is not None and self.reporter_lng is not None:
            location = DeviceLocation(
                lat=self.reporter_lat,
                lng=self.reporter_lng,
                accuracy=self.reporter_accuracy,
                captured_at=from_storage_time(self.reporter_location_timestamp),
            )
        pin: Optional[Coordinates] = None
        if self.reporter_pin_lat is not None and self.reporter_pin_lng is not None:
            pin = Coordinates(lat=self.reporter_pin_lat, lng=self.reporter_pin_lng)

        return Report(
            id=self.id,
            created_at=from_storage_time(self.created_at),
            business_name=self.business_name,
            business_address=self.business_address,
            complaint_description=self.complaint_description,
            reporter_email=self.reporter_email,
            image_urls=list(self.image_urls or []),
            document_urls=list(self.document_urls or []),
            business_pk=self.business_pk,
            reporter_location=location,
            pinned_location=pin,
            certification_accepted=self.certification_accepted,
            certification_accepted_at=from_storage_time(self.certification_accepted_at),
            tags=parse_tags(self.tags or []),
            authenticity_level=self.authenticity_level,
            authenticity_tier=AuthenticityTier(self.authenticity_tier),
            status=self.status,
        )

    def __repr__(self) -> str:
        return f"<Report {self.id}: {self.business_name} [{self.authenticity_tier}]>"
