"""Tests for the tier classifier."""

import pytest

from complaint_trust.domain.models.report import AuthenticityTier
from complaint_trust.domain.models.tags import NEGATIVE_TAGS, Tag
from complaint_trust.domain.services.tier_classifier import classify_tier


def test_no_tags_is_medium():
    """Test the neutral classification."""
    result = classify_tier(frozenset(), 100)
    assert result.tier is AuthenticityTier.MEDIUM
    assert result.score == 100


def test_medium_floor():
    """Test that Medium raises low scores to 50."""
    assert classify_tier(frozenset(), 10).score == 50
    assert classify_tier({Tag.LOCATION_VERIFIED}, 40).score == 50


def test_single_positive_tag_stays_medium():
    """Test that one positive tag is not enough for High."""
    result = classify_tier({Tag.LOCATION_VERIFIED}, 100)
    assert result.tier is AuthenticityTier.MEDIUM
    assert result.positive_count == 1


def test_two_positive_tags_are_high():
    """Test the High tier and its score floor."""
    result = classify_tier({Tag.LOCATION_VERIFIED, Tag.CREDIBLE_REPORTER}, 60)
    assert result.tier is AuthenticityTier.HIGH
    assert result.score == 75


@pytest.mark.parametrize("negative", sorted(NEGATIVE_TAGS, key=lambda tag: tag.value))
def test_any_negative_tag_is_low(negative):
    """Test that every negative tag forces Low and caps the score."""
    result = classify_tier({negative}, 100)
    assert result.tier is AuthenticityTier.LOW
    assert result.score == 25


def test_negative_dominates_positive():
    """Test that positive tags cannot outweigh a negative one."""
    tags = {
        Tag.LOCATION_VERIFIED,
        Tag.CREDIBLE_REPORTER,
        Tag.CONSISTENT_WITH_HISTORY,
        Tag.EXISTING_CASE,
    }
    result = classify_tier(tags, 100)
    assert result.tier is AuthenticityTier.LOW
    assert result.score == 25
    assert result.has_negative
    assert result.positive_count == 3


def test_low_keeps_lower_scores():
    """Test that the Low cap never raises a score."""
    assert classify_tier({Tag.HIGH_VOLUME_REPORTER}, 10).score == 10


def test_score_is_clamped():
    """Test the 0..100 bounds on the result score."""
    assert classify_tier({Tag.EXISTING_CASE}, -20).score == 0
    assert classify_tier({Tag.LOCATION_VERIFIED, Tag.CREDIBLE_REPORTER}, 140).score == 100
