# crowdreport/services/voting.py
"""
Voting & flagging ledger: one vote per (report, principal), append-only flags.
"""
from __future__ import annotations

from datetime import datetime

from crowdreport.errors import DuplicateVote, NotFound
from crowdreport.models.report import Report, VerificationFlag, Vote

# vote kinds that feed the community adjustment of the verification score
SCORING_VOTES = frozenset({"up", "down", "confirm"})


def record_vote(report: Report, principal_id: str, kind: str, now: datetime) -> bool:
    """
    Append the vote and bump exactly one tally. Returns True when the vote
    kind should trigger a community score adjustment.
    """
    if report.votes.has_voted(principal_id):
        raise DuplicateVote(report.id, principal_id)

    report.votes.voters.append(Vote(principal_id=principal_id, vote=kind, timestamp=now))
    community = report.verification.community_verification

    if kind == "up":
        report.votes.upvotes += 1
        community.upvotes += 1
    elif kind == "down":
        report.votes.downvotes += 1
        community.downvotes += 1
    elif kind == "confirm":
        report.votes.confirmations += 1
        community.corroborations += 1
    elif kind == "dispute":
        report.votes.disputations += 1
    else:
        raise ValueError(f"unknown vote kind: {kind}")

    return kind in SCORING_VOTES


def add_flag(report: Report, flag_id: str, flag_type: str, reported_by: str, reason: str, now: datetime) -> VerificationFlag:
    flag = VerificationFlag(
        id=flag_id,
        type=flag_type,
        reported_by=reported_by,
        reported_at=now,
        reason=reason,
        resolved=False,
    )
    report.verification.flags.append(flag)
    return flag


def resolve_flag(report: Report, flag_id: str, resolution: str, now: datetime) -> VerificationFlag:
    for flag in report.verification.flags:
        if flag.id == flag_id:
            flag.resolved = True
            flag.resolution = resolution
            flag.resolved_at = now
            return flag
    raise NotFound("flag", flag_id)
