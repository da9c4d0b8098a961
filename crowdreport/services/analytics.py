# crowdreport/services/analytics.py
from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List

from crowdreport.models.report import Report
from crowdreport.models.trend import Trend
from crowdreport.services.h3_utils import hex_to_center, hex_to_parent

TOP_REPORTERS = 10
TOP_HOTSPOTS = 10
TOP_KEYWORDS = 10


def _breakdown(reports: List[Report], attr: str) -> Dict[str, int]:
    return dict(Counter(getattr(r, attr) for r in reports))


def verification_rate(reports: List[Report]) -> float:
    if not reports:
        return 0.0
    verified = sum(1 for r in reports if r.verification.status == "verified")
    return verified / len(reports) * 100


def hotspots(reports: List[Report], resolution: int) -> List[Dict[str, Any]]:
    """Busiest H3 cells (coarsened to `resolution`) with their center and report types."""
    cells: Dict[str, List[Report]] = defaultdict(list)
    for r in reports:
        if r.geo_cell:
            cells[hex_to_parent(r.geo_cell, resolution)].append(r)

    ranked = sorted(cells.items(), key=lambda kv: (-len(kv[1]), kv[0]))[:TOP_HOTSPOTS]
    out = []
    for cell, members in ranked:
        lat, lon = hex_to_center(cell)
        out.append({
            "cell": cell,
            "lat": lat,
            "lon": lon,
            "count": len(members),
            "types": sorted({m.type for m in members}),
        })
    return out


def trending_keywords(trends: List[Trend], now: datetime) -> List[Dict[str, Any]]:
    counts: Counter = Counter()
    last_seen: Dict[str, datetime] = {}
    for t in trends:
        for k in t.keywords:
            counts[k] += t.report_count
            if k not in last_seen or t.last_seen > last_seen[k]:
                last_seen[k] = t.last_seen

    out = []
    for word, count in counts.most_common(TOP_KEYWORDS):
        seen = last_seen[word]
        direction = "rising" if now - seen <= timedelta(days=1) else "stable" if now - seen <= timedelta(days=7) else "falling"
        out.append({"keyword": word, "count": count, "trend": direction})
    return out


def build_analytics(
    reports: List[Report],
    trends: List[Trend],
    *,
    start: datetime,
    end: datetime,
    now: datetime,
    hotspot_resolution: int,
) -> Dict[str, Any]:
    verified_times: List[float] = []
    resolution_times: List[float] = []
    reporter_counts: Dict[str, Dict[str, Any]] = {}

    for r in reports:
        if r.verification.status == "verified" and r.verification.verified_at:
            verified_times.append((r.verification.verified_at - r.created_at).total_seconds() / 60)
        if r.status == "resolved":
            done = r.resolved_at or r.updated_at
            resolution_times.append((done - r.created_at).total_seconds() / 3600)

        entry = reporter_counts.setdefault(
            r.reporter.id,
            {"reporter_id": r.reporter.id, "name": r.reporter.name or "Anonymous", "count": 0},
        )
        entry["count"] += 1

    top = sorted(reporter_counts.values(), key=lambda e: (-e["count"], e["reporter_id"]))[:TOP_REPORTERS]

    return {
        "period": {"start": start, "end": end},
        "total_reports": len(reports),
        "by_type": _breakdown(reports, "type"),
        "by_status": _breakdown(reports, "status"),
        "by_priority": _breakdown(reports, "priority"),
        "verification_rate": verification_rate(reports),
        "average_verification_time": sum(verified_times) / len(verified_times) if verified_times else 0.0,
        "average_resolution_time": sum(resolution_times) / len(resolution_times) if resolution_times else 0.0,
        "top_reporters": top,
        "hotspots": hotspots(reports, hotspot_resolution),
        "trending_keywords": trending_keywords(
            [t for t in trends if t.last_seen >= start and t.first_seen <= end], now
        ),
    }
