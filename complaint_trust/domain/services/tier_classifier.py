"""Reduce a report's tag set to an authenticity tier and score."""

from typing import AbstractSet, FrozenSet

from ..models.classification import TierClassification
from ..models.report import AuthenticityTier
from ..models.tags import NEGATIVE_TAGS, POSITIVE_TAGS, Tag

LOW_TIER_SCORE_CAP = 25
HIGH_TIER_SCORE_FLOOR = 75
MEDIUM_TIER_SCORE_FLOOR = 50
HIGH_TIER_MIN_POSITIVE = 2


def classify_tier(
    tags: AbstractSet[Tag],
    score: int,
    negative_tags: FrozenSet[Tag] = NEGATIVE_TAGS,
    positive_tags: FrozenSet[Tag] = POSITIVE_TAGS,
) -> TierClassification:
    """Classify a final tag set.

    Any negative tag forces Low regardless of how many positive tags are
    present; the negative check must run before the positive count.

    Args:
        tags: Final tag set of the report
        score: Working authenticity score
        negative_tags: Tags that force the Low tier
        positive_tags: Tags counted towards the High tier

    Returns:
        Tier and adjusted score, clamped to [0, 100]
    """
    has_negative = not negative_tags.isdisjoint(tags)
    positive_count = len(positive_tags.intersection(tags))

    if has_negative:
        tier = AuthenticityTier.LOW
        score = min(score, LOW_TIER_SCORE_CAP)
    elif positive_count >= HIGH_TIER_MIN_POSITIVE:
        tier = AuthenticityTier.HIGH
        score = max(score, HIGH_TIER_SCORE_FLOOR)
    else:
        tier = AuthenticityTier.MEDIUM
        score = max(score, MEDIUM_TIER_SCORE_FLOOR)

    return TierClassification(
        tier=tier,
        score=max(0, min(100, score)),
        has_negative=has_negative,
        positive_count=positive_count,
    )
