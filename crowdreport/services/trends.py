# crowdreport/services/trends.py
"""
Trend detector: clusters same-category reports in a rolling window that keep
repeating the same keywords.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from crowdreport.config import Policy
from crowdreport.db.base import ReportStore
from crowdreport.models.report import Report
from crowdreport.models.trend import Trend
from crowdreport.services.clock import IdGenerator

log = logging.getLogger(__name__)


def trend_severity(mean_score: float) -> str:
    if mean_score < -0.3:
        return "high"
    if mean_score < 0:
        return "medium"
    return "low"


def trend_sentiment(mean_score: float) -> str:
    if mean_score >= 0.2:
        return "positive"
    if mean_score <= -0.2:
        return "negative"
    return "neutral"


def common_keywords(reports: List[Report], min_count: int) -> List[str]:
    """Keywords present in at least `min_count` reports, most frequent first."""
    counts: Counter = Counter()
    for r in reports:
        counts.update(set(r.metadata.analysis.keywords))
    return [word for word, n in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])) if n >= min_count]


def scoped_reports(store: ReportStore, report: Report, policy: Policy, now: datetime) -> List[Report]:
    start = now - timedelta(days=policy.trend_window_days)
    scoped = [r for r in store.reports_by_category(report.category, start, now) if r.id != report.id]
    if start <= report.created_at <= now:
        scoped.append(report)
    return scoped


def detect_trend(
    store: ReportStore,
    report: Report,
    policy: Policy,
    now: datetime,
    ids: IdGenerator,
) -> Optional[Tuple[Trend, bool]]:
    """
    Returns (trend, created) when the report opened or joined a trend, else
    None. The caller persists the returned trend.
    """
    scoped = scoped_reports(store, report, policy, now)
    if len(scoped) < policy.trend_min_reports:
        return None

    keywords = common_keywords(scoped, policy.trend_min_keyword_count)
    if not keywords:
        return None

    for trend in store.trends_by_category(report.category):
        if trend.status == "closed":
            continue
        if any(k in trend.keywords for k in keywords):
            if report.id not in trend.report_ids:
                trend.report_ids.append(report.id)
                trend.report_count += 1
            trend.last_seen = now
            return trend, False

    mean = sum(r.metadata.sentiment.score for r in scoped) / len(scoped)
    trend = Trend(
        id=ids.new("trend"),
        name=f"{report.category} - {keywords[0]}",
        category=report.category,
        type="emerging",
        severity=trend_severity(mean),
        description=f"Emerging trend in {report.category} reports with keywords: {', '.join(keywords)}",
        report_ids=[r.id for r in sorted(scoped, key=lambda r: (r.created_at, r.id))],
        report_count=len(scoped),
        sentiment=trend_sentiment(mean),
        keywords=keywords,
        first_seen=min(r.created_at for r in scoped),
        last_seen=now,
        status="new",
    )
    log.info("New trend %s in %s (%d reports, keywords=%s)", trend.id, trend.category, trend.report_count, keywords)
    return trend, True
