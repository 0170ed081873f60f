"""Domain models for complaint reports and their classification."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .geo import Coordinates, DeviceLocation
from .tags import PROXIMITY_TAGS, Tag

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

DEFAULT_AUTHENTICITY_LEVEL = 100
INITIAL_STATUS = "Submitted"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Normalize a reporter email for storage and window comparisons."""
    return email.strip().lower()


class AuthenticityTier(str, Enum):
    """Canonical three-level trust classification."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class CandidateReport(BaseModel):
    """A complaint as submitted by a reporter, before classification."""

    model_config = ConfigDict(str_strip_whitespace=True)

    business_name: str = Field(..., min_length=1, max_length=255, description="Name of the reported business")
    business_address: str = Field(..., min_length=1, description="Address of the reported business")
    complaint_description: str = Field(..., min_length=1, description="What the reporter observed")
    reporter_email: str = Field(..., max_length=255, description="Reporter contact email")
    image_urls: List[str] = Field(default_factory=list, description="Uploaded image URLs")
    document_urls: List[str] = Field(default_factory=list, description="Uploaded document URLs")
    business_pk: Optional[int] = Field(None, description="Linked registered business")
    reporter_location: Optional[DeviceLocation] = Field(None, description="Device-captured location")
    pinned_location: Optional[Coordinates] = Field(None, description="Reporter-confirmed map pin")
    location_verification_tag: Optional[Tag] = Field(
        None, description="Tag returned by a proximity verification run before submission"
    )
    certification_accepted: bool = Field(False, description="Reporter certified the report as truthful")

    @field_validator("reporter_email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        value = normalize_email(value)
        if not EMAIL_PATTERN.match(value):
            raise ValueError("reporter_email is not a valid email address")
        return value

    @field_validator("location_verification_tag")
    @classmethod
    def _proximity_tag_only(cls, value: Optional[Tag]) -> Optional[Tag]:
        if value is not None and value not in PROXIMITY_TAGS:
            raise ValueError(f"{value.value!r} cannot be supplied by the client")
        return value

    @property
    def establishment_key(self) -> tuple[str, str]:
        """The (business name, business address) pair identifying an establishment."""
        return self.business_name, self.business_address


class Report(BaseModel):
    """A persisted, classified complaint report."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Report identifier, also used as tracking id")
    created_at: datetime = Field(default_factory=utc_now, description="When the report was accepted")
    business_name: str
    business_address: str
    complaint_description: str
    reporter_email: str
    image_urls: List[str] = Field(default_factory=list)
    document_urls: List[str] = Field(default_factory=list)
    business_pk: Optional[int] = None
    reporter_location: Optional[DeviceLocation] = None
    pinned_location: Optional[Coordinates] = None
    certification_accepted: bool = False
    certification_accepted_at: Optional[datetime] = None

    tags: FrozenSet[Tag] = Field(default_factory=frozenset, description="Classification evidence")
    authenticity_level: int = Field(DEFAULT_AUTHENTICITY_LEVEL, ge=0, le=100, description="Numeric trust score")
    authenticity_tier: AuthenticityTier = Field(AuthenticityTier.MEDIUM, description="Trust tier")
    status: str = Field(INITIAL_STATUS, description="Review workflow state")

    @property
    def establishment_key(self) -> tuple[str, str]:
        """The (business name, business address) pair identifying an establishment."""
        return self.business_name, self.business_address


class TrackingSummary(BaseModel):
    """What a reporter can see about a submitted report."""

    tracking_id: UUID
    status: str
