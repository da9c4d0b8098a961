# crowdreport/services/relations.py
"""
Duplicate / relation finder.

Candidates come from the geo bucket index (H3 cells around the report) and
the time window; the exact distance, time and type/category checks run on
that small candidate set only.
"""
from __future__ import annotations

from datetime import timedelta
from typing import List

from crowdreport.config import Policy
from crowdreport.db.base import ReportStore
from crowdreport.models.report import Report
from crowdreport.services.h3_utils import cells_within, haversine_km


def is_related(report: Report, other: Report, policy: Policy) -> bool:
    if other.id == report.id:
        return False
    if haversine_km(report.lat, report.lon, other.lat, other.lon) > policy.duplicate_radius_km:
        return False
    window = timedelta(hours=policy.duplicate_window_hours)
    if abs(report.created_at - other.created_at) > window:
        return False
    return report.type == other.type or report.category == other.category


def find_related(store: ReportStore, report: Report, policy: Policy) -> List[str]:
    """Ids of stored reports that are close in space, time and kind (best effort)."""
    window = timedelta(hours=policy.duplicate_window_hours)
    cells = cells_within(report.lat, report.lon, policy.duplicate_radius_km, policy.geo_index_resolution)
    candidates = store.reports_in_cells(cells, report.created_at - window, report.created_at + window)
    return [other.id for other in candidates if is_related(report, other, policy)]
