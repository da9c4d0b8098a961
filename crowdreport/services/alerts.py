# crowdreport/services/alerts.py
"""
Alerts derived from a submission: report clusters and critical reports.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from crowdreport.config import Policy
from crowdreport.db.base import ReportStore
from crowdreport.models.alert import AffectedArea, Alert
from crowdreport.models.report import Report
from crowdreport.services.clock import IdGenerator
from crowdreport.services.h3_utils import cells_within, haversine_km


def nearby_recent(store: ReportStore, report: Report, policy: Policy, now: datetime) -> List[Report]:
    """Reports within the cluster radius submitted in the trailing cluster window (new report included)."""
    start = now - timedelta(minutes=policy.cluster_window_minutes)
    cells = cells_within(report.lat, report.lon, policy.cluster_radius_km, policy.geo_index_resolution)
    out = [
        r for r in store.reports_in_cells(cells, start, now)
        if r.id != report.id and haversine_km(report.lat, report.lon, r.lat, r.lon) <= policy.cluster_radius_km
    ]
    out.append(report)
    return out


def check_alert_conditions(
    store: ReportStore,
    report: Report,
    policy: Policy,
    now: datetime,
    ids: IdGenerator,
) -> List[Alert]:
    alerts: List[Alert] = []

    nearby = nearby_recent(store, report, policy, now)
    if len(nearby) >= policy.cluster_min_reports:
        alerts.append(Alert(
            id=ids.new("alert"),
            type="cluster",
            severity="warning",
            title="Report cluster detected",
            description=(
                f"{len(nearby)} reports within {policy.cluster_radius_km:g} km "
                f"in the last {policy.cluster_window_minutes:g} minutes"
            ),
            affected_area=AffectedArea(lat=report.lat, lon=report.lon, radius=policy.cluster_radius_km),
            report_ids=[r.id for r in nearby],
            triggered_at=now,
        ))

    if report.priority == "critical":
        alerts.append(Alert(
            id=ids.new("alert"),
            type="critical",
            severity="critical",
            title="Critical report submitted",
            description=report.title,
            report_ids=[report.id],
            triggered_at=now,
        ))

    return alerts
