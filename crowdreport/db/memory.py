# crowdreport/db/memory.py
"""
In-process store: an arena of records plus secondary indexes.

  _reports      id -> Report                     (primary key)
  _by_cell      H3 cell -> {ids}                 (geo bucket index)
  _by_category  category -> [(created_at, id)]   (time-sorted, bisect)
  _by_reporter  reporter id -> {ids}
  _by_time      [(created_at, id)]               (time-sorted, bisect)

Reports are indexed once at first write; geo_cell, category, reporter and
created_at never change after submission.
"""
from __future__ import annotations

import threading
from bisect import bisect_left, bisect_right, insort
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from crowdreport.db.base import ReportStore
from crowdreport.models.alert import Alert
from crowdreport.models.campaign import Campaign
from crowdreport.models.report import Report
from crowdreport.models.reporter import Reporter
from crowdreport.models.trend import Trend

_TimeKey = Tuple[datetime, str]


def _slice(index: List[_TimeKey], start: Optional[datetime], end: Optional[datetime]) -> List[str]:
    lo = 0 if start is None else bisect_left(index, (start, ""))
    # "\uffff" sorts after every id so end is inclusive
    hi = len(index) if end is None else bisect_right(index, (end, "\uffff"))
    return [rid for _, rid in index[lo:hi]]


class MemoryReportStore(ReportStore):
    def __init__(self):
        self._lock = threading.RLock()
        self._reports: Dict[str, Report] = {}
        self._by_cell: Dict[str, Set[str]] = defaultdict(set)
        self._by_category: Dict[str, List[_TimeKey]] = defaultdict(list)
        self._by_reporter: Dict[str, Set[str]] = defaultdict(set)
        self._by_time: List[_TimeKey] = []

        self._reporters: Dict[str, Reporter] = {}
        self._trends: Dict[str, Trend] = {}
        self._alerts: Dict[str, Alert] = {}
        self._campaigns: Dict[str, Campaign] = {}

    # ---------- Reports ----------
    def put_report(self, report: Report) -> None:
        with self._lock:
            if report.id not in self._reports:
                key = (report.created_at, report.id)
                self._by_cell[report.geo_cell].add(report.id)
                insort(self._by_category[report.category], key)
                self._by_reporter[report.reporter.id].add(report.id)
                insort(self._by_time, key)
            self._reports[report.id] = report.model_copy(deep=True)

    def get_report(self, report_id: str) -> Optional[Report]:
        with self._lock:
            report = self._reports.get(report_id)
            return report.model_copy(deep=True) if report else None

    def _copies(self, ids: Iterable[str]) -> List[Report]:
        return [self._reports[rid].model_copy(deep=True) for rid in ids if rid in self._reports]

    def reports_in_cells(
        self, cells: Iterable[str], start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Report]:
        with self._lock:
            ids: Set[str] = set()
            for cell in cells:
                ids.update(self._by_cell.get(cell, ()))
            out = []
            for rid in sorted(ids):
                r = self._reports[rid]
                if start is not None and r.created_at < start:
                    continue
                if end is not None and r.created_at > end:
                    continue
                out.append(r.model_copy(deep=True))
            return out

    def reports_by_category(self, category: str, start: datetime, end: datetime) -> List[Report]:
        with self._lock:
            return self._copies(_slice(self._by_category.get(category, []), start, end))

    def reports_by_reporter(self, reporter_id: str) -> List[Report]:
        with self._lock:
            return self._copies(sorted(self._by_reporter.get(reporter_id, ())))

    def reports_between(self, start: datetime, end: datetime) -> List[Report]:
        with self._lock:
            return self._copies(_slice(self._by_time, start, end))

    def all_reports(self) -> List[Report]:
        with self._lock:
            return self._copies(rid for _, rid in self._by_time)

    # ---------- Reporters ----------
    def put_reporter(self, reporter: Reporter) -> None:
        with self._lock:
            self._reporters[reporter.id] = reporter.model_copy(deep=True)

    def get_reporter(self, reporter_id: str) -> Optional[Reporter]:
        with self._lock:
            reporter = self._reporters.get(reporter_id)
            return reporter.model_copy(deep=True) if reporter else None

    def count_reporters(self) -> int:
        with self._lock:
            return len(self._reporters)

    # ---------- Trends ----------
    def put_trend(self, trend: Trend) -> None:
        with self._lock:
            self._trends[trend.id] = trend.model_copy(deep=True)

    def get_trend(self, trend_id: str) -> Optional[Trend]:
        with self._lock:
            trend = self._trends.get(trend_id)
            return trend.model_copy(deep=True) if trend else None

    def trends_by_category(self, category: str) -> List[Trend]:
        with self._lock:
            return [t.model_copy(deep=True) for t in self._trends.values() if t.category == category]

    def list_trends(self) -> List[Trend]:
        with self._lock:
            return [t.model_copy(deep=True) for t in self._trends.values()]

    # ---------- Alerts ----------
    def put_alert(self, alert: Alert) -> None:
        with self._lock:
            self._alerts[alert.id] = alert.model_copy(deep=True)

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        with self._lock:
            alert = self._alerts.get(alert_id)
            return alert.model_copy(deep=True) if alert else None

    def list_alerts(self) -> List[Alert]:
        with self._lock:
            return [a.model_copy(deep=True) for a in self._alerts.values()]

    # ---------- Campaigns ----------
    def put_campaign(self, campaign: Campaign) -> None:
        with self._lock:
            self._campaigns[campaign.id] = campaign.model_copy(deep=True)

    def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        with self._lock:
            campaign = self._campaigns.get(campaign_id)
            return campaign.model_copy(deep=True) if campaign else None

    def list_campaigns(self) -> List[Campaign]:
        with self._lock:
            return [c.model_copy(deep=True) for c in self._campaigns.values()]
