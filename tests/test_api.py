"""
HTTP surface: routing, request bodies and the error-to-status mapping.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import LAT, LON, location
from crowdreport.dependencies import get_engine
from crowdreport.main import _api_prefix, _cors_settings, app


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _body(**overrides):
    body = {
        "type": "hazard",
        "category": "road",
        "title": "Pothole",
        "description": "Large pothole near the corner",
        "location": location(),
        "reporter": {"id": "u-1"},
    }
    body.update(overrides)
    return body


def _post(client, **overrides):
    resp = client.post("/reports", json=_body(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


# ============================================================================
# REPORTS
# ============================================================================

class TestReports:

    def test_submit_and_fetch(self, client):
        created = _post(client)
        assert created["status"] == "submitted"
        assert created["reporter"]["id"] == "u-1"
        assert created["timeline"][0]["type"] == "created"

        resp = client.get(f"/reports/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["id"] == created["id"]

    def test_unknown_report_is_404(self, client):
        resp = client.get("/reports/report-404")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NotFound"

    def test_missing_coordinates_is_422(self, client):
        resp = client.post("/reports", json=_body(location={"address": "Main St"}))
        assert resp.status_code == 422
        assert resp.json()["error"] == "ValidationError"

    def test_bad_type_is_rejected_by_the_body_model(self, client):
        resp = client.post("/reports", json=_body(type="rumour"))
        assert resp.status_code == 422

    def test_list_with_filters(self, client):
        _post(client)
        _post(client, type="damage", title="Wall cracked", reporter={"id": "u-2"})

        page = client.get("/reports").json()
        assert page["total"] == 2

        page = client.get("/reports", params={"type": "damage"}).json()
        assert page["total"] == 1
        assert page["reports"][0]["type"] == "damage"

        page = client.get("/reports", params={"lat": LAT, "lon": LON, "radius_km": 1}).json()
        assert page["total"] == 2

        page = client.get("/reports", params={"limit": 1}).json()
        assert page["total"] == 2
        assert len(page["reports"]) == 1

    def test_partial_location_filter_is_422(self, client):
        resp = client.get("/reports", params={"lat": LAT, "lon": LON})
        assert resp.status_code == 422

    def test_update(self, client):
        created = _post(client)
        resp = client.patch(f"/reports/{created['id']}", json={"actor": "off-1", "status": "actionable"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "actionable"
        assert resp.json()["timeline"][-1]["type"] == "status_change"


# ============================================================================
# VERIFICATION AND COMMUNITY
# ============================================================================

class TestCommunity:

    def test_verify(self, client):
        created = _post(client)
        resp = client.post(
            f"/reports/{created['id']}/verify",
            json={"verifier_id": "o-1", "verifier_name": "Ana", "verifier_org": "LAFD", "status": "verified"},
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "verified"
        assert resp.json()["verification"]["official_verification"]["verifier_org"] == "LAFD"

    def test_second_vote_is_409(self, client):
        created = _post(client)
        url = f"/reports/{created['id']}/votes"
        assert client.post(url, json={"principal_id": "p-1", "vote": "up"}).status_code == 200
        resp = client.post(url, json={"principal_id": "p-1", "vote": "down"})
        assert resp.status_code == 409
        assert resp.json()["error"] == "DuplicateVote"

    def test_flag_quorum_quarantines(self, client):
        created = _post(client)
        url = f"/reports/{created['id']}/flags"
        for who in ("a", "b", "c"):
            resp = client.post(url, json={"type": "spam", "reported_by": who})
        assert resp.status_code == 200
        assert resp.json()["status"] == "under_review"

    def test_resolve_unknown_flag_is_404(self, client):
        created = _post(client)
        resp = client.post(
            f"/reports/{created['id']}/flags/flag-404/resolve",
            json={"resolution": "dismissed", "actor": "mod-1"},
        )
        assert resp.status_code == 404

    def test_comment(self, client):
        created = _post(client)
        resp = client.post(
            f"/reports/{created['id']}/comments",
            json={"author_id": "u-9", "author_name": "Sam", "content": "Still there this morning"},
        )
        assert resp.status_code == 201
        assert resp.json()["content"] == "Still there this morning"


# ============================================================================
# RESPONSE WORKFLOW
# ============================================================================

class TestWorkflow:

    def test_assign_then_complete(self, client):
        created = _post(client)
        url = f"/reports/{created['id']}/assignment"
        resp = client.post(url, json={"assigned_to": "crew-7", "assigned_by": "disp-1", "organization": "Public Works"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "assigned"

        resp = client.patch(url, json={"status": "completed"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "resolved"

    def test_assignment_update_without_assignment_is_409(self, client):
        created = _post(client)
        resp = client.patch(f"/reports/{created['id']}/assignment", json={"status": "in_progress"})
        assert resp.status_code == 409
        assert resp.json()["error"] == "InvalidTransition"

    def test_merge(self, client):
        primary = _post(client)
        dup = _post(client, reporter={"id": "u-2"})
        resp = client.post(f"/reports/{primary['id']}/merge", json={"duplicate_ids": [dup["id"]], "actor": "mod-1"})
        assert resp.status_code == 200
        assert resp.json()["timeline"][-1]["type"] == "merged"
        assert client.get(f"/reports/{dup['id']}").json()["status"] == "duplicate"


# ============================================================================
# TRENDS, ALERTS, CAMPAIGNS, ANALYTICS
# ============================================================================

class TestOtherResources:

    def test_reporter_ledger(self, client):
        _post(client)
        resp = client.get("/reporters/u-1")
        assert resp.status_code == 200
        assert resp.json()["activity"]["total_reports"] == 1
        assert client.get("/reporters/nobody").status_code == 404

    def test_trends(self, client):
        for i in range(5):
            _post(client, category="infrastructure", title="Power outage", description="lights out",
                  reporter={"id": f"u-{i}"})
        trends = client.get("/trends").json()
        assert len(trends) == 1

        resp = client.patch(f"/trends/{trends[0]['id']}", json={"status": "acknowledged"})
        assert resp.status_code == 200
        resp = client.patch(f"/trends/{trends[0]['id']}", json={"status": "new"})
        assert resp.status_code == 409

    def test_alerts(self, client):
        _post(client, type="incident", category="fire", title="Fire", description="warehouse fire")
        alerts = client.get("/alerts", params={"unresolved": True}).json()
        assert [a["type"] for a in alerts] == ["critical"]

        url = f"/alerts/{alerts[0]['id']}"
        assert client.post(f"{url}/acknowledge", json={"actor": "ops-1"}).json()["acknowledged_by"] == "ops-1"
        assert client.post(f"{url}/resolve").status_code == 200
        assert client.post(f"{url}/resolve").status_code == 409
        assert client.get("/alerts", params={"unresolved": True}).json() == []

    def test_campaigns(self, client):
        body = {
            "name": "Pothole sweep",
            "status": "active",
            "area": {"type": "radius", "center": {"lat": LAT, "lon": LON}, "radius": 2},
            "start_date": "2024-02-01T00:00:00Z",
            "created_by": "ops-1",
        }
        resp = client.post("/campaigns", json=body)
        assert resp.status_code == 201
        campaign_id = resp.json()["id"]

        _post(client)
        listed = client.get("/campaigns", params={"status": "active"}).json()
        assert listed[0]["current_reports"] == 1

        resp = client.patch(f"/campaigns/{campaign_id}", json={"status": "completed"})
        assert resp.json()["status"] == "completed"

    def test_campaign_without_center_is_422(self, client):
        body = {
            "name": "Broken",
            "area": {"type": "radius", "radius": 2},
            "start_date": "2024-02-01T00:00:00Z",
            "created_by": "ops-1",
        }
        assert client.post("/campaigns", json=body).status_code == 422

    def test_analytics_and_statistics(self, client):
        _post(client)
        out = client.get("/analytics").json()
        assert out["total_reports"] == 1

        stats = client.get("/statistics").json()
        assert stats["total_reports"] == 1
        assert stats["total_reporters"] == 1
        assert stats["reports_today"] == 1

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


# ============================================================================
# BOOTSTRAP SETTINGS
# ============================================================================

class TestBootstrap:

    @pytest.mark.parametrize("raw, prefix", [("", ""), ("api", "/api"), ("/api/", "/api"), ("  /v1 ", "/v1")])
    def test_api_prefix(self, monkeypatch, raw, prefix):
        monkeypatch.setenv("API_PREFIX", raw)
        assert _api_prefix() == prefix

    def test_cors_explicit_origins(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com,")
        settings = _cors_settings()
        assert settings["allow_origins"] == ["https://a.example.com", "https://b.example.com"]
        assert "allow_origin_regex" not in settings

    def test_cors_defaults_to_localhost(self, monkeypatch):
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        settings = _cors_settings()
        assert "allow_origins" not in settings
        assert settings["allow_origin_regex"].startswith("^https?://(localhost")
