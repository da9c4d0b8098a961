from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from crowdreport.models.alert import Alert
from crowdreport.models.campaign import Campaign
from crowdreport.models.report import Report
from crowdreport.models.reporter import Reporter
from crowdreport.models.trend import Trend


class ReportStore(ABC):
    """
    Keyed persistence for reports, reporters, trends, alerts and campaigns.

    Reads return copies: mutating a returned object never changes stored
    state until it is written back with the matching put_*.
    The index queries (`reports_in_cells`, `reports_by_category`, ...) are
    the only way the engine reaches more than one report at a time.
    """

    # ---------- Reports ----------
    @abstractmethod
    def put_report(self, report: Report) -> None: ...

    @abstractmethod
    def get_report(self, report_id: str) -> Optional[Report]: ...

    @abstractmethod
    def reports_in_cells(
        self, cells: Iterable[str], start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Report]: ...

    @abstractmethod
    def reports_by_category(self, category: str, start: datetime, end: datetime) -> List[Report]: ...

    @abstractmethod
    def reports_by_reporter(self, reporter_id: str) -> List[Report]: ...

    @abstractmethod
    def reports_between(self, start: datetime, end: datetime) -> List[Report]: ...

    @abstractmethod
    def all_reports(self) -> List[Report]: ...

    # ---------- Reporters ----------
    @abstractmethod
    def put_reporter(self, reporter: Reporter) -> None: ...

    @abstractmethod
    def get_reporter(self, reporter_id: str) -> Optional[Reporter]: ...

    @abstractmethod
    def count_reporters(self) -> int: ...

    # ---------- Trends ----------
    @abstractmethod
    def put_trend(self, trend: Trend) -> None: ...

    @abstractmethod
    def get_trend(self, trend_id: str) -> Optional[Trend]: ...

    @abstractmethod
    def trends_by_category(self, category: str) -> List[Trend]: ...

    @abstractmethod
    def list_trends(self) -> List[Trend]: ...

    # ---------- Alerts ----------
    @abstractmethod
    def put_alert(self, alert: Alert) -> None: ...

    @abstractmethod
    def get_alert(self, alert_id: str) -> Optional[Alert]: ...

    @abstractmethod
    def list_alerts(self) -> List[Alert]: ...

    # ---------- Campaigns ----------
    @abstractmethod
    def put_campaign(self, campaign: Campaign) -> None: ...

    @abstractmethod
    def get_campaign(self, campaign_id: str) -> Optional[Campaign]: ...

    @abstractmethod
    def list_campaigns(self) -> List[Campaign]: ...
