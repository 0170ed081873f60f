"""Domain model for the classification tag vocabulary."""

from enum import Enum
from typing import FrozenSet, Iterable


class TagPolarity(str, Enum):
    """Whether a tag counts for or against a report's authenticity."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class Tag(str, Enum):
    """Closed vocabulary of classification evidence."""

    # Negative evidence
    HIGH_VOLUME_REPORTER = "High-Volume Reporter"
    MULTI_ESTABLISHMENT_REPORTER = "Multi-Establishment Reporter"
    EXISTING_CASE = "Existing Case"
    FAILED_LOCATION_VERIFICATION = "Failed Location Verification"
    REPORTER_UNDER_REVIEW = "Reporter Under Review"  # reserved, no producing rule
    POST_CLEARANCE_COMPLAINT = "Post-Clearance Complaint"  # reserved, no producing rule

    # Positive evidence
    LOCATION_VERIFIED = "Location Verified"
    CREDIBLE_REPORTER = "Credible Reporter"  # reserved, no producing rule
    CONSISTENT_WITH_HISTORY = "Consistent With History"  # reserved, no producing rule

    @property
    def polarity(self) -> TagPolarity:
        """Get the polarity of the tag."""
        if self in NEGATIVE_TAGS:
            return TagPolarity.NEGATIVE
        return TagPolarity.POSITIVE

    @classmethod
    def parse(cls, value: "str | Tag") -> "Tag":
        """Parse a stored tag string.

        Raises:
            ValueError: If the value is not part of the vocabulary
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            raise ValueError(f"Unknown tag: {value!r}")


NEGATIVE_TAGS: FrozenSet[Tag] = frozenset({
    Tag.HIGH_VOLUME_REPORTER,
    Tag.MULTI_ESTABLISHMENT_REPORTER,
    Tag.EXISTING_CASE,
    Tag.FAILED_LOCATION_VERIFICATION,
    Tag.REPORTER_UNDER_REVIEW,
    Tag.POST_CLEARANCE_COMPLAINT,
})

POSITIVE_TAGS: FrozenSet[Tag] = frozenset({
    Tag.LOCATION_VERIFIED,
    Tag.CREDIBLE_REPORTER,
    Tag.CONSISTENT_WITH_HISTORY,
})

# Tags a client may attach to a submission after running proximity verification.
PROXIMITY_TAGS: FrozenSet[Tag] = frozenset({
    Tag.LOCATION_VERIFIED,
    Tag.FAILED_LOCATION_VERIFICATION,
})


def add_tag(tags: Iterable[Tag], tag: Tag) -> FrozenSet[Tag]:
    """Return a tag set with ``tag`` added.

    Adding a tag that is already present leaves the set unchanged.
    """
    return frozenset(tags) | {tag}


def parse_tags(values: Iterable[str]) -> FrozenSet[Tag]:
    """Parse stored tag strings into a tag set, dropping duplicates."""
    return frozenset(Tag.parse(value) for value in values)


def serialize_tags(tags: Iterable[Tag]) -> list[str]:
    """Serialize a tag set to a sorted list of strings for storage."""
    return sorted(tag.value for tag in set(tags))
