# crowdreport/db/dynamo.py
"""
DynamoDB-backed ReportStore.

Tables (names from Settings):
  Reports    PK report_id; GSIs
               cell-index      (geo_cell, created_at)
               category-index  (category, created_at)
               reporter-index  (reporter_id, created_at)
  Reporters  PK reporter_id
  Trends     PK trend_id; GSI category-index (category)
  Alerts     PK alert_id
  Campaigns  PK campaign_id

Entities are stored as a JSON string attribute `doc` next to their key and
index attributes, which keeps floats out of DynamoDB's Decimal handling.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

import boto3
from boto3.dynamodb.conditions import Key
from pydantic import BaseModel

from crowdreport.config import Settings
from crowdreport.db.base import ReportStore
from crowdreport.models.alert import Alert
from crowdreport.models.campaign import Campaign
from crowdreport.models.report import Report
from crowdreport.models.reporter import Reporter
from crowdreport.models.trend import Trend

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# ISO-8601 UTC strings sort lexicographically in time order
_MIN_TS = "0000-01-01T00:00:00"
_MAX_TS = "9999-12-31T23:59:59"


def _ts(value: Optional[datetime], default: str) -> str:
    return value.isoformat() if value is not None else default


def _doc(model: BaseModel) -> str:
    return json.dumps(model.model_dump(mode="json"), separators=(",", ":"))


def _load(cls: Type[M], item: Optional[Dict[str, Any]]) -> Optional[M]:
    if not item or "doc" not in item:
        return None
    return cls.model_validate(json.loads(item["doc"]))


class DynamoReportStore(ReportStore):
    def __init__(self, settings: Settings, dynamodb=None):
        self.settings = settings
        self.dynamodb = dynamodb or boto3.resource("dynamodb", region_name=settings.aws_region)
        self.reports_table = self.dynamodb.Table(settings.reports_table)
        self.reporters_table = self.dynamodb.Table(settings.reporters_table)
        self.trends_table = self.dynamodb.Table(settings.trends_table)
        self.alerts_table = self.dynamodb.Table(settings.alerts_table)
        self.campaigns_table = self.dynamodb.Table(settings.campaigns_table)

    # ---------- paging helpers ----------
    @staticmethod
    def _query_all(table, **kwargs) -> List[Dict[str, Any]]:
        """Run a query, transparently auto-paginating until done."""
        items: List[Dict[str, Any]] = []
        lek: Optional[Dict[str, Any]] = None
        while True:
            if lek:
                kwargs["ExclusiveStartKey"] = lek
            resp = table.query(**kwargs)
            items.extend(resp.get("Items", []))
            lek = resp.get("LastEvaluatedKey")
            if not lek:
                break
        return items

    @staticmethod
    def _scan_all(table) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        kwargs: Dict[str, Any] = {}
        while True:
            resp = table.scan(**kwargs)
            items.extend(resp.get("Items", []))
            lek = resp.get("LastEvaluatedKey")
            if not lek:
                break
            kwargs["ExclusiveStartKey"] = lek
        return items

    def _put(self, table, item: Dict[str, Any]) -> None:
        try:
            table.put_item(Item=item)
        except Exception:
            log.exception("DynamoDB put_item failed on %s", table.name)
            raise

    # ---------- Reports ----------
    def put_report(self, report: Report) -> None:
        self._put(self.reports_table, {
            "report_id": report.id,
            "geo_cell": report.geo_cell,
            "category": report.category,
            "reporter_id": report.reporter.id,
            "created_at": report.created_at.isoformat(),
            "doc": _doc(report),
        })

    def get_report(self, report_id: str) -> Optional[Report]:
        resp = self.reports_table.get_item(Key={"report_id": report_id})
        return _load(Report, resp.get("Item"))

    def _reports_from(self, items: Iterable[Dict[str, Any]]) -> List[Report]:
        out = [_load(Report, it) for it in items]
        return sorted((r for r in out if r is not None), key=lambda r: (r.created_at, r.id))

    def reports_in_cells(
        self, cells: Iterable[str], start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Report]:
        items: List[Dict[str, Any]] = []
        for cell in set(cells):
            items.extend(self._query_all(
                self.reports_table,
                IndexName=self.settings.reports_cell_index,
                KeyConditionExpression=Key("geo_cell").eq(cell)
                & Key("created_at").between(_ts(start, _MIN_TS), _ts(end, _MAX_TS)),
            ))
        return self._reports_from(items)

    def reports_by_category(self, category: str, start: datetime, end: datetime) -> List[Report]:
        return self._reports_from(self._query_all(
            self.reports_table,
            IndexName=self.settings.reports_category_index,
            KeyConditionExpression=Key("category").eq(category)
            & Key("created_at").between(start.isoformat(), end.isoformat()),
        ))

    def reports_by_reporter(self, reporter_id: str) -> List[Report]:
        return self._reports_from(self._query_all(
            self.reports_table,
            IndexName=self.settings.reports_reporter_index,
            KeyConditionExpression=Key("reporter_id").eq(reporter_id),
        ))

    def reports_between(self, start: datetime, end: datetime) -> List[Report]:
        return [r for r in self.all_reports() if start <= r.created_at <= end]

    def all_reports(self) -> List[Report]:
        return self._reports_from(self._scan_all(self.reports_table))

    # ---------- Reporters ----------
    def put_reporter(self, reporter: Reporter) -> None:
        self._put(self.reporters_table, {"reporter_id": reporter.id, "doc": _doc(reporter)})

    def get_reporter(self, reporter_id: str) -> Optional[Reporter]:
        resp = self.reporters_table.get_item(Key={"reporter_id": reporter_id})
        return _load(Reporter, resp.get("Item"))

    def count_reporters(self) -> int:
        return len(self._scan_all(self.reporters_table))

    # ---------- Trends ----------
    def put_trend(self, trend: Trend) -> None:
        self._put(self.trends_table, {"trend_id": trend.id, "category": trend.category, "doc": _doc(trend)})

    def get_trend(self, trend_id: str) -> Optional[Trend]:
        resp = self.trends_table.get_item(Key={"trend_id": trend_id})
        return _load(Trend, resp.get("Item"))

    def trends_by_category(self, category: str) -> List[Trend]:
        items = self._query_all(
            self.trends_table,
            IndexName=self.settings.trends_category_index,
            KeyConditionExpression=Key("category").eq(category),
        )
        return [t for t in (_load(Trend, it) for it in items) if t is not None]

    def list_trends(self) -> List[Trend]:
        return [t for t in (_load(Trend, it) for it in self._scan_all(self.trends_table)) if t is not None]

    # ---------- Alerts ----------
    def put_alert(self, alert: Alert) -> None:
        self._put(self.alerts_table, {"alert_id": alert.id, "doc": _doc(alert)})

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        resp = self.alerts_table.get_item(Key={"alert_id": alert_id})
        return _load(Alert, resp.get("Item"))

    def list_alerts(self) -> List[Alert]:
        return [a for a in (_load(Alert, it) for it in self._scan_all(self.alerts_table)) if a is not None]

    # ---------- Campaigns ----------
    def put_campaign(self, campaign: Campaign) -> None:
        self._put(self.campaigns_table, {"campaign_id": campaign.id, "doc": _doc(campaign)})

    def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        resp = self.campaigns_table.get_item(Key={"campaign_id": campaign_id})
        return _load(Campaign, resp.get("Item"))

    def list_campaigns(self) -> List[Campaign]:
        return [c for c in (_load(Campaign, it) for it in self._scan_all(self.campaigns_table)) if c is not None]
