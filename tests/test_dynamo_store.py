"""
DynamoReportStore against an in-process fake of the boto3 DynamoDB resource.

The fake understands the key conditions the store builds (Equals, Between,
And) and pages query/scan results so the LastEvaluatedKey loops run.
"""

import copy
from datetime import timedelta
from typing import Any, Dict, List

import pytest

from conftest import LAT, LON, T0
from crowdreport.config import Settings
from crowdreport.db.dynamo import DynamoReportStore
from crowdreport.models.alert import Alert
from crowdreport.models.trend import Trend
from crowdreport.services.h3_utils import point_to_hex
from crowdreport.services.reputation import new_reporter

PAGE = 2

KEYS = {
    "Reports": "report_id",
    "Reporters": "reporter_id",
    "Trends": "trend_id",
    "ReportAlerts": "alert_id",
    "Campaigns": "campaign_id",
}


# ============================================================================
# FAKE
# ============================================================================

def _matches(cond, item: Dict[str, Any]) -> bool:
    expr = cond.get_expression()
    op, values = expr["operator"], expr["values"]
    if op == "AND":
        return all(_matches(v, item) for v in values)
    name = values[0].name
    if name not in item:
        return False
    if op == "=":
        return item[name] == values[1]
    if op == "BETWEEN":
        return values[1] <= item[name] <= values[2]
    raise NotImplementedError(op)


class FakeTable:
    def __init__(self, name: str, key: str):
        self.name = name
        self.key = key
        self.items: Dict[str, Dict[str, Any]] = {}
        self.queries: List[Dict[str, Any]] = []

    def put_item(self, Item):
        self.items[Item[self.key]] = copy.deepcopy(Item)

    def get_item(self, Key):
        item = self.items.get(Key[self.key])
        return {"Item": copy.deepcopy(item)} if item else {}

    def _page(self, rows, start_key):
        start = start_key["i"] if start_key else 0
        resp = {"Items": [copy.deepcopy(r) for r in rows[start:start + PAGE]]}
        if start + PAGE < len(rows):
            resp["LastEvaluatedKey"] = {"i": start + PAGE}
        return resp

    def query(self, IndexName, KeyConditionExpression, ExclusiveStartKey=None):
        self.queries.append({"IndexName": IndexName})
        rows = [it for it in self.items.values() if _matches(KeyConditionExpression, it)]
        return self._page(rows, ExclusiveStartKey)

    def scan(self, ExclusiveStartKey=None):
        return self._page(list(self.items.values()), ExclusiveStartKey)


class FakeDynamo:
    def __init__(self):
        self.tables = {name: FakeTable(name, key) for name, key in KEYS.items()}

    def Table(self, name):
        return self.tables[name]


class BrokenTable(FakeTable):
    def put_item(self, Item):
        raise RuntimeError("ProvisionedThroughputExceeded")


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def dynamo():
    return FakeDynamo()


@pytest.fixture
def dstore(dynamo):
    return DynamoReportStore(Settings(store_backend="dynamo"), dynamodb=dynamo)


CELL = point_to_hex(LAT, LON, 8)


def _reports(make_report):
    out = []
    for i, (category, reporter) in enumerate([("road", "u-1"), ("road", "u-2"), ("water", "u-1"), ("road", "u-1")]):
        r = make_report(id=f"r{i}", category=category, created_at=T0 + timedelta(hours=i), geo_cell=CELL)
        r.reporter.id = reporter
        out.append(r)
    return out


# ============================================================================
# TESTS
# ============================================================================

class TestReports:

    def test_round_trip_keeps_floats_and_datetimes(self, dstore, dynamo, make_report):
        r = make_report(id="r1", geo_cell=CELL)
        r.verification.score = 42.5
        dstore.put_report(r)

        item = dynamo.tables["Reports"].items["r1"]
        assert item["geo_cell"] == CELL
        assert item["category"] == "road"
        assert item["reporter_id"] == "u-1"
        assert isinstance(item["doc"], str)
        assert dstore.get_report("r1") == r

    def test_missing(self, dstore):
        assert dstore.get_report("nope") is None

    def test_cell_index_with_time_range(self, dstore, dynamo, make_report):
        for r in _reports(make_report):
            dstore.put_report(r)
        got = dstore.reports_in_cells([CELL, CELL], start=T0 + timedelta(hours=1))
        assert [r.id for r in got] == ["r1", "r2", "r3"]
        assert dynamo.tables["Reports"].queries[-1]["IndexName"] == "cell-index"

    def test_category_index_paginates(self, dstore, make_report):
        for r in _reports(make_report):
            dstore.put_report(r)
        got = dstore.reports_by_category("road", T0, T0 + timedelta(hours=3))
        assert [r.id for r in got] == ["r0", "r1", "r3"]

    def test_reporter_index(self, dstore, make_report):
        for r in _reports(make_report):
            dstore.put_report(r)
        assert [r.id for r in dstore.reports_by_reporter("u-1")] == ["r0", "r2", "r3"]

    def test_scan_based_queries(self, dstore, make_report):
        for r in _reports(make_report):
            dstore.put_report(r)
        assert [r.id for r in dstore.all_reports()] == ["r0", "r1", "r2", "r3"]
        assert [r.id for r in dstore.reports_between(T0 + timedelta(hours=2), T0 + timedelta(hours=9))] == ["r2", "r3"]

    def test_write_errors_propagate(self, dynamo, make_report):
        dynamo.tables["Reports"] = BrokenTable("Reports", "report_id")
        dstore = DynamoReportStore(Settings(), dynamodb=dynamo)
        with pytest.raises(RuntimeError):
            dstore.put_report(make_report())


class TestOtherCollections:

    def test_reporters(self, dstore):
        dstore.put_reporter(new_reporter("u-1", T0))
        dstore.put_reporter(new_reporter("u-2", T0))
        assert dstore.get_reporter("u-1").reputation.score == 100
        assert dstore.count_reporters() == 2

    def test_trends_by_category(self, dstore):
        for i, category in enumerate(["road", "water", "road"]):
            dstore.put_trend(Trend(id=f"t{i}", name="x", category=category, first_seen=T0, last_seen=T0))
        assert sorted(t.id for t in dstore.trends_by_category("road")) == ["t0", "t2"]
        assert len(dstore.list_trends()) == 3
        assert dstore.get_trend("t1").category == "water"

    def test_alerts(self, dstore):
        alert = Alert(id="a1", type="critical", severity="critical", title="t", description="d", triggered_at=T0)
        dstore.put_alert(alert)
        assert dstore.get_alert("a1") == alert
        assert dstore.list_alerts() == [alert]


class TestEngineOnDynamo:

    def test_full_submission(self, dstore, clock, ids, lexicon):
        from crowdreport.services.engine import ReportingEngine

        engine = ReportingEngine(dstore, lexicon=lexicon, clock=clock, ids=ids)
        loc = {"coordinates": {"lat": LAT, "lon": LON}, "accuracy": 10}
        a = engine.submit_report(type="hazard", category="road", title="Pothole", description="deep",
                                 location=loc, reporter={"id": "u-1"})
        clock.advance(minutes=5)
        b = engine.submit_report(type="hazard", category="road", title="Pothole", description="deeper",
                                 location=loc, reporter={"id": "u-1"})
        assert b.related_reports == [a.id]
        assert engine.get_report(a.id).related_reports == [b.id]
        assert engine.get_reporter("u-1").activity.total_reports == 2
