"""Domain models for classification results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Union

from .geo import Coordinates
from .report import AuthenticityTier
from .tags import Tag


class SpamRule(str, Enum):
    """Submission-pattern rules applied before a report is committed."""

    REPORTER_VOLUME = "reporter_volume"
    REPORTER_BREADTH = "reporter_breadth"
    ESTABLISHMENT_VOLUME = "establishment_volume"


@dataclass(frozen=True)
class SpamEvaluation:
    """Outcome of the spam pattern rules for one candidate report."""

    tags: FrozenSet[Tag]
    score: int
    reporter_reports_in_window: int
    reporter_establishments_in_window: int
    establishment_reports_in_window: int
    fired_rules: FrozenSet[SpamRule] = field(default_factory=frozenset)

    @property
    def flagged(self) -> bool:
        """Whether any rule fired."""
        return bool(self.fired_rules)


@dataclass(frozen=True)
class TierClassification:
    """Tier and score derived from a final tag set."""

    tier: AuthenticityTier
    score: int
    has_negative: bool
    positive_count: int


class CoordinateSource(str, Enum):
    """Where the business coordinates used for a proximity check came from."""

    REGISTERED = "registered"
    GEOCODED = "geocoded"


@dataclass(frozen=True)
class ProximityResult:
    """Successful proximity verification."""

    tag: Tag
    distance_meters: float
    threshold_meters: Union[int, float]
    business_coords: Coordinates
    coords_source: CoordinateSource
    business_address: Optional[str] = None

    @property
    def verified(self) -> bool:
        """Whether the reporter was within the threshold."""
        return self.tag is Tag.LOCATION_VERIFIED
