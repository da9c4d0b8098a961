"""
Reporter reputation ledger tests.
"""

import pytest

from conftest import T0
from crowdreport.services.reputation import apply_event, credibility_level, new_reporter


def _with(total: int, score: float, reporter_type: str = "registered"):
    r = new_reporter("u-1", T0, reporter_type=reporter_type)
    r.activity.total_reports = total
    r.reputation.score = score
    return r


class TestLedgerEvents:

    def test_new_record(self):
        r = new_reporter("u-1", T0)
        assert r.reputation.score == 100
        assert r.reputation.level == "new"
        assert r.activity.total_reports == 0

    def test_submitted(self):
        r = apply_event(new_reporter("u-1", T0), "submitted", T0, category="road")
        assert r.activity.total_reports == 1
        assert r.activity.reports_by_category == {"road": 1}
        assert r.activity.last_active == T0

    def test_five_reports_four_verified(self):
        r = new_reporter("u-1", T0)
        for _ in range(5):
            apply_event(r, "submitted", T0)
        for _ in range(4):
            apply_event(r, "verified", T0)
        assert r.reputation.factors.accuracy == pytest.approx(80.0)
        assert r.reputation.score == 140
        # 5 reports but score still below 200
        assert r.reputation.level == "new"
        assert r.reputation.trend == "rising"

    def test_rejected_floors_at_zero(self):
        r = _with(1, 3)
        apply_event(r, "rejected", T0)
        assert r.reputation.score == 0
        assert r.activity.rejected_reports == 1
        assert r.reputation.trend == "declining"

    def test_votes_and_comments(self):
        r = new_reporter("u-1", T0)
        apply_event(r, "voted", T0)
        apply_event(r, "commented", T0)
        assert (r.activity.total_votes, r.activity.comments_posted) == (1, 1)
        assert r.reputation.score == 100

    def test_unknown_event(self):
        with pytest.raises(ValueError):
            apply_event(new_reporter("u-1", T0), "promoted", T0)


class TestTiers:

    @pytest.mark.parametrize("total, score, tier", [
        (100, 900, "platinum"),
        (99, 950, "gold"),
        (50, 700, "gold"),
        (20, 500, "silver"),
        (5, 200, "bronze"),
        (4, 1000, "new"),
        (500, 199, "new"),
    ])
    def test_both_conditions_must_hold(self, total, score, tier):
        assert credibility_level(_with(total, score)) == tier

    def test_tier_can_fall(self):
        r = _with(5, 203)
        r.reputation.level = credibility_level(r)
        assert r.reputation.level == "bronze"
        apply_event(r, "rejected", T0)
        assert r.reputation.level == "new"

    def test_officials_are_always_verified_official(self):
        assert credibility_level(_with(0, 0, reporter_type="official")) == "verified_official"
