# crowdreport/services/verification.py
"""
Verification scorer.

The functions here mutate the Report they are given (the engine hands them a
private copy) and return a small result describing what changed, so the
caller can write the timeline and decide what to persist.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from crowdreport.config import Policy
from crowdreport.models.report import OfficialVerification, Report

LOCATION_ACCURACY_M = 50
LOCATION_POINTS = 20
MEDIA_POINTS = 25
CREDIBILITY_POINTS = 30
TEXT_MIN_LENGTH = 50
TEXT_POINTS = 10


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


@dataclass
class AutoScore:
    score: float
    methods: List[str] = field(default_factory=list)
    location_match: bool = False
    media_analysis: bool = False
    text_analysis: bool = False


def automatic_score(report: Report) -> AutoScore:
    """Automatic sub-score from location, media, reporter credibility and text."""
    out = AutoScore(score=0.0)

    if report.location.accuracy < LOCATION_ACCURACY_M:
        out.location_match = True
        out.score += LOCATION_POINTS
        out.methods.append("location")

    if any(m.metadata is not None and m.metadata.geotagged for m in report.media):
        out.media_analysis = True
        out.score += MEDIA_POINTS
        out.methods.append("media")

    out.score += (report.reporter.credibility_score / 100.0) * CREDIBILITY_POINTS

    if len(report.description or "") > TEXT_MIN_LENGTH:
        out.text_analysis = True
        out.score += TEXT_POINTS
        out.methods.append("text")

    out.score = clamp_score(out.score)
    return out


def run_auto_verification(report: Report, policy: Policy, now: datetime) -> bool:
    """
    Record the automatic sub-score on the report and, when the score reaches
    the threshold and the reporter is past the `new` tier, promote both the
    verification status and the report status to `verified`.

    Returns True when the report was promoted. Flag quarantine takes
    precedence: a report already at the flag quorum is never promoted.
    """
    auto = automatic_score(report)
    v = report.verification
    v.score = auto.score
    v.method = list(auto.methods)
    v.auto_verification.location_match = auto.location_match
    v.auto_verification.media_analysis = auto.media_analysis
    v.auto_verification.text_analysis = auto.text_analysis

    if v.unresolved_flags() >= policy.flag_quorum:
        return False
    if auto.score >= policy.auto_verify_threshold and report.reporter.credibility_level != "new":
        v.status = "verified"
        v.verified_at = now
        report.status = "verified"
        return True
    return False


def apply_official_verification(
    report: Report,
    *,
    verifier_id: str,
    verifier_name: str,
    verifier_org: str,
    status: str,
    notes: str,
    now: datetime,
) -> None:
    """Official review overrides the score: 100 when verified, 50 otherwise."""
    v = report.verification
    v.status = status
    v.verified_by = [verifier_id]
    v.verified_at = now
    v.official_verification = OfficialVerification(
        verifier_id=verifier_id,
        verifier_name=verifier_name,
        verifier_org=verifier_org,
        timestamp=now,
        notes=notes,
    )
    v.score = 100.0 if status == "verified" else 50.0
    if "official" not in v.method:
        v.method.append("official")
    if status == "verified":
        report.status = "verified"


def community_delta(report: Report) -> float:
    cv = report.verification.community_verification
    return (2 * cv.upvotes + 3 * cv.corroborations - cv.downvotes) * 2 / 10


def apply_community_adjustment(report: Report) -> float:
    """
    Nudge the existing score by the community tally (not a replacement).
    Returns the applied delta after clamping.
    """
    v = report.verification
    before = v.score
    v.score = clamp_score(before + community_delta(report))
    if "community" not in v.method:
        v.method.append("community")
    return v.score - before


def check_quarantine(report: Report, policy: Policy) -> Optional[str]:
    """
    Force `under_review` once unresolved flags reach the quorum, regardless of
    the verification score. Terminal reports (rejected/duplicate) stay put.
    Returns the previous status when a transition happened.
    """
    if report.verification.unresolved_flags() < policy.flag_quorum:
        return None
    if report.status in ("under_review", "rejected", "duplicate"):
        return None
    previous = report.status
    report.status = "under_review"
    return previous
