"""Spam pattern rules evaluated against previously committed reports."""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Set

from pydantic import BaseModel, Field

from ..models.classification import SpamEvaluation, SpamRule
from ..models.report import DEFAULT_AUTHENTICITY_LEVEL, normalize_email
from ..models.tags import Tag, add_tag
from ..ports.report_store import ReportWindowReader

logger = logging.getLogger(__name__)

RULE_TAGS = {
    SpamRule.REPORTER_VOLUME: Tag.HIGH_VOLUME_REPORTER,
    SpamRule.REPORTER_BREADTH: Tag.MULTI_ESTABLISHMENT_REPORTER,
    SpamRule.ESTABLISHMENT_VOLUME: Tag.EXISTING_CASE,
}


class SpamRuleConfig(BaseModel):
    """Thresholds and windows for the spam pattern rules."""

    reporter_volume_window: timedelta = Field(timedelta(hours=24), description="Rule 1 window")
    reporter_volume_threshold: int = Field(5, ge=1, description="Prior reports by one email that trigger Rule 1")
    reporter_breadth_window: timedelta = Field(timedelta(days=7), description="Rule 2 window")
    reporter_breadth_threshold: int = Field(
        10, ge=1, description="Distinct establishments (candidate included) that trigger Rule 2"
    )
    establishment_volume_window: timedelta = Field(timedelta(days=7), description="Rule 3 window")
    establishment_volume_threshold: int = Field(
        9, ge=1, description="Prior reports against one establishment that trigger Rule 3"
    )
    flagged_score_cap: int = Field(50, ge=0, le=100, description="Score cap when any rule fires")
    combined_score_cap: int = Field(25, ge=0, le=100, description="Score cap when Rules 1 and 2 both fire")


class SpamPatternEvaluator:
    """Detects high-volume and implausible submission patterns.

    The evaluator only annotates: it adds negative tags and lowers the
    working score, it never rejects a report. Counts are taken from the
    reader's snapshot, so concurrent submissions from one reporter can each
    miss the others.
    """

    def __init__(self, config: SpamRuleConfig | None = None):
        """Initialize the evaluator.

        Args:
            config: Rule thresholds and windows (defaults apply when omitted)
        """
        self._config = config or SpamRuleConfig()

    @property
    def config(self) -> SpamRuleConfig:
        """Get the active rule configuration."""
        return self._config

    def evaluate(
        self,
        reader: ReportWindowReader,
        reporter_email: str,
        business_name: str,
        business_address: str,
        now: datetime,
        tags: Iterable[Tag] = (),
        score: int = DEFAULT_AUTHENTICITY_LEVEL,
    ) -> SpamEvaluation:
        """Run all three rules for a candidate report.

        Args:
            reader: Window reader over committed reports (the candidate is not among them)
            reporter_email: Reporter email of the candidate
            business_name: Business name of the candidate
            business_address: Business address of the candidate
            now: Creation instant of the candidate; every window ends here
            tags: Tags already on the candidate
            score: Working authenticity score before the rules run

        Returns:
            Tags and clamped score after the rules
        """
        cfg = self._config
        email = normalize_email(reporter_email)

        # Rule 1: reporter volume, candidate excluded
        reporter_count = reader.count_reports_by_reporter(
            email, now - cfg.reporter_volume_window, now
        )

        # Rule 2: reporter breadth, candidate's own establishment included
        establishments: Set[tuple[str, str]] = set(
            reader.distinct_establishments_by_reporter(email, now - cfg.reporter_breadth_window, now)
        )
        establishments.add((business_name, business_address))
        establishment_breadth = len(establishments)

        # Rule 3: establishment volume, candidate excluded
        establishment_count = reader.count_reports_for_establishment(
            business_name, business_address, now - cfg.establishment_volume_window, now
        )

        fired: Set[SpamRule] = set()
        if reporter_count >= cfg.reporter_volume_threshold:
            fired.add(SpamRule.REPORTER_VOLUME)
        if establishment_breadth >= cfg.reporter_breadth_threshold:
            fired.add(SpamRule.REPORTER_BREADTH)
        if establishment_count >= cfg.establishment_volume_threshold:
            fired.add(SpamRule.ESTABLISHMENT_VOLUME)

        result_tags = frozenset(tags)
        for rule in SpamRule:
            if rule in fired:
                result_tags = add_tag(result_tags, RULE_TAGS[rule])

        result_score = score
        if fired:
            result_score = min(result_score, cfg.flagged_score_cap)
        if SpamRule.REPORTER_VOLUME in fired and SpamRule.REPORTER_BREADTH in fired:
            result_score = min(result_score, cfg.combined_score_cap)

        if fired:
            logger.info(
                f"🚩 Spam rules fired for {email}: {sorted(rule.value for rule in fired)} "
                f"(reporter_reports={reporter_count}, reporter_establishments={establishment_breadth}, "
                f"establishment_reports={establishment_count}); score {score} -> {result_score}"
            )
        else:
            logger.debug(f"✅ No spam pattern for {email}")

        return SpamEvaluation(
            tags=result_tags,
            score=result_score,
            reporter_reports_in_window=reporter_count,
            reporter_establishments_in_window=establishment_breadth,
            establishment_reports_in_window=establishment_count,
            fired_rules=frozenset(fired),
        )
