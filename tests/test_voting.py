"""
Voting & flagging ledger tests.
"""

import pytest

from conftest import T0
from crowdreport.errors import DuplicateVote, NotFound
from crowdreport.services.voting import add_flag, record_vote, resolve_flag


class TestVotes:

    @pytest.mark.parametrize("kind, counter, scoring", [
        ("up", "upvotes", True),
        ("down", "downvotes", True),
        ("confirm", "confirmations", True),
        ("dispute", "disputations", False),
    ])
    def test_each_kind_bumps_exactly_one_counter(self, make_report, kind, counter, scoring):
        report = make_report()
        assert record_vote(report, "p-1", kind, T0) is scoring
        tallies = {c: getattr(report.votes, c) for c in ("upvotes", "downvotes", "confirmations", "disputations")}
        assert tallies.pop(counter) == 1
        assert set(tallies.values()) == {0}

    def test_confirm_counts_as_corroboration(self, make_report):
        report = make_report()
        record_vote(report, "p-1", "confirm", T0)
        assert report.verification.community_verification.corroborations == 1

    def test_dispute_leaves_community_tally_alone(self, make_report):
        report = make_report()
        record_vote(report, "p-1", "dispute", T0)
        cv = report.verification.community_verification
        assert (cv.upvotes, cv.downvotes, cv.corroborations) == (0, 0, 0)

    def test_second_vote_is_rejected(self, make_report):
        report = make_report()
        record_vote(report, "p-1", "up", T0)
        with pytest.raises(DuplicateVote):
            record_vote(report, "p-1", "down", T0)
        assert len(report.votes.voters) == 1
        assert report.votes.downvotes == 0


class TestFlags:

    def test_flags_start_unresolved(self, make_report):
        report = make_report()
        flag = add_flag(report, "flag-1", "spam", "p-1", "ad link", T0)
        assert flag.resolved is False
        assert report.verification.unresolved_flags() == 1

    def test_resolve(self, make_report):
        report = make_report()
        add_flag(report, "flag-1", "spam", "p-1", "", T0)
        flag = resolve_flag(report, "flag-1", "not spam", T0)
        assert flag.resolved is True
        assert flag.resolution == "not spam"
        assert report.verification.unresolved_flags() == 0

    def test_resolve_unknown_flag(self, make_report):
        with pytest.raises(NotFound):
            resolve_flag(make_report(), "flag-404", "x", T0)
