# crowdreport/services/reputation.py
"""
Reporter reputation ledger.

Counters only ever grow; score moves +10 per verified report and -5 per
rejection (floored at 0). The tier is recomputed after every update and can
rise or fall.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from crowdreport.models.reporter import Reporter, ReporterProfile

VERIFIED_BONUS = 10
REJECTED_PENALTY = 5

# (min total reports, min score, tier), checked top-down; both must hold
TIER_THRESHOLDS = (
    (100, 900, "platinum"),
    (50, 700, "gold"),
    (20, 500, "silver"),
    (5, 200, "bronze"),
)


def credibility_level(reporter: Reporter) -> str:
    if reporter.type == "official":
        return "verified_official"
    total = reporter.activity.total_reports
    score = reporter.reputation.score
    for min_reports, min_score, tier in TIER_THRESHOLDS:
        if total >= min_reports and score >= min_score:
            return tier
    return "new"


def new_reporter(reporter_id: str, now: datetime, *, reporter_type: str = "registered",
                 profile: Optional[ReporterProfile] = None) -> Reporter:
    reporter = Reporter(
        id=reporter_id,
        type=reporter_type,
        profile=profile or ReporterProfile(),
        created_at=now,
        updated_at=now,
    )
    reporter.reputation.level = credibility_level(reporter)
    return reporter


def apply_event(reporter: Reporter, action: str, now: datetime, *, category: Optional[str] = None) -> Reporter:
    """
    Apply one ledger event: submitted | verified | rejected | voted | commented.
    """
    activity = reporter.activity
    reputation = reporter.reputation
    before = reputation.score
    activity.last_active = now

    if action == "submitted":
        activity.total_reports += 1
        if category:
            activity.reports_by_category[category] = activity.reports_by_category.get(category, 0) + 1
    elif action == "verified":
        activity.verified_reports += 1
        reputation.score += VERIFIED_BONUS
        if activity.total_reports:
            reputation.factors.accuracy = min(100.0, activity.verified_reports / activity.total_reports * 100)
    elif action == "rejected":
        activity.rejected_reports += 1
        reputation.score = max(0.0, reputation.score - REJECTED_PENALTY)
    elif action == "voted":
        activity.total_votes += 1
    elif action == "commented":
        activity.comments_posted += 1
    else:
        raise ValueError(f"unknown reputation event: {action}")

    if reputation.score > before:
        reputation.trend = "rising"
    elif reputation.score < before:
        reputation.trend = "declining"

    reputation.level = credibility_level(reporter)
    reporter.updated_at = now
    return reporter
