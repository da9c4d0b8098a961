# crowdreport/services/engine.py
"""
Report lifecycle orchestrator.

ReportingEngine is the only entry point the API layer talks to. It sequences
classifier -> scorer -> relation finder -> reputation ledger -> trend detector
-> alerts on submission, and owns every state transition afterwards.

Each operation loads private copies from the store, mutates them under the
relevant locks and writes them back at the end; an error raised mid-way
leaves the store untouched.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from crowdreport.config import Lexicon, Policy, load_lexicon
from crowdreport.db.base import ReportStore
from crowdreport.errors import InvalidTransition, NotFound, ValidationError
from crowdreport.models.alert import ALERT_SEVERITY_ORDER, Alert
from crowdreport.models.campaign import Campaign, CampaignIn
from crowdreport.models.report import (
    PRIORITY_ORDER,
    TERMINAL_STATUSES,
    AssignmentIn,
    AssignmentInfo,
    CommentIn,
    FlagIn,
    LocationIn,
    MediaIn,
    Report,
    ReportComment,
    ReporterIn,
    ReporterInfo,
    ReportLocation,
    ReportMedia,
    ReportMetadata,
    TimelineEvent,
    VerifierIn,
)
from crowdreport.models.reporter import Reporter, ReporterProfile
from crowdreport.models.trend import SEVERITY_ORDER, TREND_STATUS_ORDER, Trend
from crowdreport.services import reputation, verification, voting
from crowdreport.services.alerts import check_alert_conditions
from crowdreport.services.analytics import build_analytics, verification_rate
from crowdreport.services.campaigns import area_contains, is_open, record_participation, validate_area
from crowdreport.services.classifier import classify
from crowdreport.services.clock import Clock, IdGenerator, SystemClock, UuidIdGenerator, as_utc
from crowdreport.services.h3_utils import cells_within, haversine_km, point_to_hex, rings_for_radius
from crowdreport.services.locks import LockRegistry
from crowdreport.services.relations import find_related
from crowdreport.services.trends import detect_trend

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_PAGE_SIZE = 50
# beyond this many rings a radius query falls back to a scan
MAX_INDEX_RINGS = 25

AlertPublisher = Callable[[Alert], Any]


def _coerce(cls: Type[M], value: Any, what: str) -> M:
    if isinstance(value, cls):
        return value
    try:
        return cls.model_validate(value)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid {what}: {e.errors()[0].get('msg', e)}") from e


class ReportingEngine:
    def __init__(
        self,
        store: ReportStore,
        *,
        lexicon: Optional[Lexicon] = None,
        policy: Optional[Policy] = None,
        clock: Optional[Clock] = None,
        ids: Optional[IdGenerator] = None,
        publisher: Optional[AlertPublisher] = None,
    ):
        self.store = store
        self.lexicon = lexicon or load_lexicon()
        self.policy = policy or Policy()
        self.clock = clock or SystemClock()
        self.ids = ids or UuidIdGenerator()
        self.publisher = publisher
        self.locks = LockRegistry()

    # ---------------- helpers ----------------
    def _now(self) -> datetime:
        return self.clock.now()

    def _load(self, report_id: str) -> Report:
        report = self.store.get_report(report_id)
        if report is None:
            raise NotFound("report", report_id)
        return report

    def _event(self, report: Report, kind: str, actor: str, actor_type: str, description: str,
               now: datetime, details: Optional[Dict[str, Any]] = None) -> None:
        report.timeline.append(TimelineEvent(
            id=self.ids.new("event"),
            type=kind,
            timestamp=now,
            actor=actor,
            actor_type=actor_type,
            description=description,
            details=details,
        ))
        report.updated_at = now

    def _ledger(self, reporter_id: str, action: str, now: datetime) -> Reporter:
        """Apply one event to a reporter record, creating it on first sight."""
        with self.locks.hold(f"reporter:{reporter_id}"):
            record = self.store.get_reporter(reporter_id)
            if record is None:
                record = reputation.new_reporter(reporter_id, now)
            reputation.apply_event(record, action, now)
            self.store.put_reporter(record)
            return record

    def _publish(self, alerts: Iterable[Alert]) -> None:
        if self.publisher is None:
            return
        for alert in alerts:
            try:
                self.publisher(alert)
            except Exception:
                log.exception("Alert publisher failed for %s", alert.id)

    # ---------------- submission ----------------
    def _reporter_snapshot(self, info: ReporterIn, reporter_id: str, known: Optional[Reporter]) -> ReporterInfo:
        if info.type:
            rtype = info.type
        elif known is not None:
            rtype = known.type
        else:
            rtype = "registered" if info.id else "anonymous"

        if info.credibility_level:
            level = info.credibility_level
        elif rtype == "official":
            level = "verified_official"
        elif known is not None:
            level = known.reputation.level
        else:
            level = "new"

        return ReporterInfo(
            id=reporter_id,
            type=rtype,
            name=info.name or (known.profile.display_name if known else None),
            phone=info.phone,
            email=info.email,
            credibility_score=info.credibility_score if info.credibility_score is not None else 50,
            credibility_level=level,
            total_reports=known.activity.total_reports if known else 0,
            verified_reports=known.activity.verified_reports if known else 0,
            organization=info.organization,
            role=info.role,
        )

    def submit_report(
        self,
        *,
        type: str,
        category: str,
        title: str,
        description: str,
        location: Any,
        reporter: Any = None,
        media: Optional[Sequence[Any]] = None,
        tags: Optional[Sequence[str]] = None,
        subcategory: Optional[str] = None,
        source: str = "mobile_app",
    ) -> Report:
        if not (title or "").strip():
            raise ValidationError("title is required")
        if not (description or "").strip():
            raise ValidationError("description is required")
        if location is None:
            raise ValidationError("location is required")
        loc = _coerce(LocationIn, location, "location")
        if loc.coordinates is None:
            raise ValidationError("location coordinates are required")
        info = _coerce(ReporterIn, reporter or {}, "reporter")
        media_in = [_coerce(MediaIn, m, "media") for m in (media or [])]

        now = self._now()
        reporter_id = info.id or f"anon-{int(now.timestamp() * 1000)}"
        result = classify(self.lexicon, type, title, description)

        with self.locks.hold(f"reporter:{reporter_id}", f"trends:{category}"):
            known = self.store.get_reporter(reporter_id)
            try:
                report = Report(
                    id=self.ids.new("report"),
                    type=type,
                    category=category,
                    subcategory=subcategory,
                    status="submitted",
                    priority=result.priority,
                    title=title,
                    description=description,
                    location=ReportLocation(
                        **loc.model_dump(exclude={"geocode_source"}),
                        geocode_source=loc.geocode_source or "gps",
                    ),
                    reporter=self._reporter_snapshot(info, reporter_id, known),
                    media=[
                        ReportMedia(**m.model_dump(), id=self.ids.new("media"), verified=False, uploaded_at=now)
                        for m in media_in
                    ],
                    tags=list(tags or []),
                    metadata=ReportMetadata(
                        source=source,
                        urgency_score=result.urgency_score,
                        impact_score=result.impact_score,
                        sentiment=result.sentiment,
                        analysis=result.analysis,
                    ),
                    geo_cell=point_to_hex(loc.coordinates.lat, loc.coordinates.lon, self.policy.geo_index_resolution),
                    created_at=now,
                    updated_at=now,
                )
            except PydanticValidationError as e:
                raise ValidationError(f"invalid report: {e.errors()[0].get('msg', e)}") from e

            self._event(report, "created", "System", "system", "Report submitted", now)

            if verification.run_auto_verification(report, self.policy, now):
                self._event(report, "verified", "System", "system",
                            f"Auto-verified (score {report.verification.score:.0f})", now)

            related = find_related(self.store, report, self.policy)
            report.related_reports = related
            if related:
                report.verification.auto_verification.cross_reference = True

            trend_result = detect_trend(self.store, report, self.policy, now, self.ids)
            alerts = check_alert_conditions(self.store, report, self.policy, now, self.ids)

            ledger_record = known or reputation.new_reporter(
                reporter_id, now,
                reporter_type=report.reporter.type,
                profile=ReporterProfile(
                    display_name=info.name, email=info.email, phone=info.phone,
                    organization=info.organization, role=info.role,
                ),
            )
            reputation.apply_event(ledger_record, "submitted", now, category=category)

            # everything computed: persist
            self.store.put_report(report)
            self.store.put_reporter(ledger_record)
            if trend_result is not None:
                self.store.put_trend(trend_result[0])
            for alert in alerts:
                self.store.put_alert(alert)

        self._link_back(report)
        self._join_campaigns(report)
        log.info(
            "Report %s submitted type=%s priority=%s score=%.1f status=%s related=%d alerts=%d",
            report.id, report.type, report.priority, report.verification.score,
            report.status, len(related), len(alerts),
        )
        self._publish(alerts)
        return report

    def _link_back(self, report: Report) -> None:
        """Record the new report on each related report found at submission."""
        for other_id in report.related_reports:
            with self.locks.hold(f"report:{other_id}"):
                other = self.store.get_report(other_id)
                if other is None or report.id in other.related_reports:
                    continue
                other.add_related(report.id)
                self.store.put_report(other)

    def _join_campaigns(self, report: Report) -> None:
        for campaign in self.store.list_campaigns():
            if not is_open(campaign, report.created_at) or not area_contains(campaign.area, report.lat, report.lon):
                continue
            with self.locks.hold(f"campaign:{campaign.id}"):
                current = self.store.get_campaign(campaign.id)
                if current is None or not is_open(current, report.created_at):
                    continue
                record_participation(current, report.reporter.id)
                self.store.put_campaign(current)

    # ---------------- queries ----------------
    def get_report(self, report_id: str) -> Report:
        return self._load(report_id)

    def get_reports(
        self,
        *,
        type: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        verified: Optional[bool] = None,
        location: Optional[Tuple[float, float, float]] = None,
        reporter_id: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        date_range: Optional[Tuple[datetime, datetime]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """
        Filtered, paginated listing sorted by priority (critical first) then
        newest first. `location` is (lat, lon, radius_km).
        """
        if date_range is not None:
            date_range = (as_utc(date_range[0]), as_utc(date_range[1]))
        if location is not None:
            lat, lon, radius = location
            res = self.policy.geo_index_resolution
            if rings_for_radius(radius, res) <= MAX_INDEX_RINGS:
                start, end = date_range if date_range else (None, None)
                reports = self.store.reports_in_cells(cells_within(lat, lon, radius, res), start, end)
            else:
                reports = self.store.all_reports()
        elif reporter_id is not None:
            reports = self.store.reports_by_reporter(reporter_id)
        elif date_range is not None:
            reports = self.store.reports_between(*date_range)
        else:
            reports = self.store.all_reports()

        def keep(r: Report) -> bool:
            if type and r.type != type:
                return False
            if status and r.status != status:
                return False
            if priority and r.priority != priority:
                return False
            if verified is not None and (r.verification.status == "verified") != verified:
                return False
            if location is not None and haversine_km(location[0], location[1], r.lat, r.lon) > location[2]:
                return False
            if reporter_id and r.reporter.id != reporter_id:
                return False
            if tags and not any(t in r.tags for t in tags):
                return False
            if date_range and not (date_range[0] <= r.created_at <= date_range[1]):
                return False
            return True

        matched = [r for r in reports if keep(r)]
        matched.sort(key=lambda r: r.created_at, reverse=True)
        matched.sort(key=lambda r: PRIORITY_ORDER[r.priority])
        return {"reports": matched[offset:offset + limit], "total": len(matched)}

    def get_reporter(self, reporter_id: str) -> Reporter:
        record = self.store.get_reporter(reporter_id)
        if record is None:
            raise NotFound("reporter", reporter_id)
        return record

    # ---------------- lifecycle ----------------
    def update_report(
        self,
        report_id: str,
        *,
        actor: str,
        actor_type: str = "official",
        status: Optional[str] = None,
        priority: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        notes: Optional[str] = None,
    ) -> Report:
        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            now = self._now()
            changes: List[str] = []
            status_changed = False

            if status and status != report.status:
                if report.status in TERMINAL_STATUSES:
                    raise InvalidTransition(f"report {report_id} is {report.status}; cannot move to {status}")
                if status == "duplicate":
                    # a duplicate must point at its primary; only merge_reports links the two
                    raise InvalidTransition(f"report {report_id} can only become a duplicate through a merge")
                changes.append(f"Status: {report.status} → {status}")
                report.status = status
                status_changed = True
                if status == "resolved":
                    report.resolved_at = now

            if priority and priority != report.priority:
                changes.append(f"Priority: {report.priority} → {priority}")
                report.priority = priority

            if description:
                report.description = description
                changes.append("Description updated")

            if tags is not None:
                report.tags = list(tags)
                changes.append("Tags updated")

            try:
                # re-validate literals (status / priority) on the copy
                report = Report.model_validate(report.model_dump())
            except PydanticValidationError as e:
                raise ValidationError(f"invalid update: {e.errors()[0].get('msg', e)}") from e

            if changes or notes:
                text = "; ".join(changes) or "Updated"
                if notes:
                    text += f" - {notes}"
                self._event(report, "status_change" if status_changed else "updated", actor, actor_type, text, now)

            self.store.put_report(report)

        if status_changed and report.status == "rejected":
            self._ledger(report.reporter.id, "rejected", now)
        return report

    def verify_report(self, report_id: str, verifier: Any, status: str, notes: str = "") -> Report:
        who = _coerce(VerifierIn, verifier, "verifier")
        if status not in ("pending", "verified", "partially_verified", "unverified", "conflicting"):
            raise ValidationError(f"invalid verification status: {status}")

        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            now = self._now()
            already = report.verification.official_verification is not None and report.verification.status == "verified"
            verification.apply_official_verification(
                report,
                verifier_id=who.verifier_id,
                verifier_name=who.verifier_name,
                verifier_org=who.verifier_org,
                status=status,
                notes=notes,
                now=now,
            )
            self._event(report, "verified", who.verifier_name, "official",
                        f"Verified by {who.verifier_org}: {notes}", now, details={"status": status})
            self.store.put_report(report)

        if status == "verified" and not already:
            self._ledger(report.reporter.id, "verified", now)
        return report

    def vote_on_report(self, report_id: str, principal_id: str, kind: str) -> Report:
        if kind not in ("up", "down", "confirm", "dispute"):
            raise ValidationError(f"invalid vote kind: {kind}")

        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            now = self._now()
            if voting.record_vote(report, principal_id, kind, now):
                verification.apply_community_adjustment(report)
            report.updated_at = now
            self.store.put_report(report)

        self._ledger(principal_id, "voted", now)
        return report

    def flag_report(self, report_id: str, flag: Any) -> Report:
        data = _coerce(FlagIn, flag, "flag")
        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            now = self._now()
            voting.add_flag(report, self.ids.new("flag"), data.type, data.reported_by, data.reason, now)
            previous = verification.check_quarantine(report, self.policy)
            if previous is not None:
                log.warning("Report %s quarantined after %d unresolved flags",
                            report.id, report.verification.unresolved_flags())
                self._event(report, "status_change", "System", "system",
                            f"Status: {previous} → under_review - flag quorum reached", now)
            report.updated_at = now
            self.store.put_report(report)
        return report

    def resolve_flag(self, report_id: str, flag_id: str, resolution: str, actor: str) -> Report:
        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            now = self._now()
            flag = voting.resolve_flag(report, flag_id, resolution, now)
            self._event(report, "updated", actor, "moderator", f"Flag {flag.type} resolved: {resolution}", now)
            verification.check_quarantine(report, self.policy)
            self.store.put_report(report)
        return report

    def assign_report(self, report_id: str, assignment: Any) -> Report:
        data = _coerce(AssignmentIn, assignment, "assignment")
        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            if report.status in TERMINAL_STATUSES:
                raise InvalidTransition(f"report {report_id} is {report.status}; cannot assign")
            now = self._now()
            report.assignment = AssignmentInfo(**data.model_dump(), assigned_at=now, status="pending")
            report.status = "assigned"
            team = f" - {data.team}" if data.team else ""
            self._event(report, "assigned", data.assigned_by, "official", f"Assigned to {data.organization}{team}", now)
            self.store.put_report(report)
        return report

    def update_assignment_status(self, report_id: str, status: str, notes: Optional[str] = None) -> Report:
        if status not in ("pending", "acknowledged", "in_progress", "completed", "escalated"):
            raise ValidationError(f"invalid assignment status: {status}")

        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            if report.assignment is None:
                raise InvalidTransition(f"report {report_id} has no assignment")
            now = self._now()
            report.assignment.status = status
            if notes:
                report.assignment.notes = notes

            kind = "updated"
            if status == "completed" and report.status != "resolved":
                report.status = "resolved"
                report.resolved_at = now
                kind = "resolved"
            suffix = f" - {notes}" if notes else ""
            self._event(report, kind, report.assignment.assigned_to, "responder",
                        f"Assignment status: {status}{suffix}", now)
            self.store.put_report(report)
        return report

    def add_comment(self, report_id: str, comment: Any) -> ReportComment:
        data = _coerce(CommentIn, comment, "comment")
        with self.locks.hold(f"report:{report_id}"):
            report = self._load(report_id)
            now = self._now()
            new_comment = ReportComment(**data.model_dump(), id=self.ids.new("comment"), created_at=now)
            report.comments.append(new_comment)
            actor_type = "reporter" if data.author_type == "citizen" else data.author_type
            self._event(report, "comment", data.author_name, actor_type,
                        "Official response added" if data.is_official else "Comment added", now)
            self.store.put_report(report)

        self._ledger(data.author_id, "commented", now)
        return new_comment

    def merge_reports(self, primary_id: str, duplicate_ids: Sequence[str], actor: str) -> Report:
        dup_ids = list(dict.fromkeys(duplicate_ids))
        if not dup_ids:
            raise ValidationError("duplicate_ids must not be empty")
        if primary_id in dup_ids:
            raise ValidationError("a report cannot be merged into itself")

        keys = [f"report:{rid}" for rid in [primary_id, *dup_ids]]
        with self.locks.hold(*keys):
            primary = self._load(primary_id)
            duplicates = [self._load(rid) for rid in dup_ids]
            now = self._now()

            for dup in duplicates:
                previous = dup.status
                dup.status = "duplicate"
                dup.add_related(primary.id)
                self._event(dup, "status_change", actor, "moderator",
                            f"Status: {previous} → duplicate - merged into {primary.id}", now)

                primary.media.extend(dup.media)
                primary.votes.upvotes += dup.votes.upvotes
                primary.votes.confirmations += dup.votes.confirmations
                primary.add_related(dup.id)

            self._event(primary, "merged", actor, "moderator",
                        f"Merged {len(duplicates)} duplicate reports", now,
                        details={"duplicates": dup_ids})

            for dup in duplicates:
                self.store.put_report(dup)
            self.store.put_report(primary)

        log.info("Merged %s into %s by %s", dup_ids, primary_id, actor)
        return primary

    # ---------------- trends ----------------
    def get_trends(
        self,
        *,
        category: Optional[str] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
        min_severity: Optional[str] = None,
    ) -> List[Trend]:
        trends = self.store.trends_by_category(category) if category else self.store.list_trends()
        if type:
            trends = [t for t in trends if t.type == type]
        if status:
            trends = [t for t in trends if t.status == status]
        if min_severity:
            floor = SEVERITY_ORDER[min_severity]
            trends = [t for t in trends if SEVERITY_ORDER[t.severity] >= floor]
        return sorted(trends, key=lambda t: t.last_seen, reverse=True)

    def update_trend_status(self, trend_id: str, status: str) -> Trend:
        if status not in TREND_STATUS_ORDER:
            raise ValidationError(f"invalid trend status: {status}")
        found = self.store.get_trend(trend_id)
        if found is None:
            raise NotFound("trend", trend_id)
        # same lock the submission path holds while it joins reports to a trend
        with self.locks.hold(f"trends:{found.category}"):
            trend = self.store.get_trend(trend_id)
            if TREND_STATUS_ORDER.index(status) < TREND_STATUS_ORDER.index(trend.status):
                raise InvalidTransition(f"trend {trend_id} cannot go from {trend.status} back to {status}")
            trend.status = status
            self.store.put_trend(trend)
        return trend

    # ---------------- alerts ----------------
    def get_alerts(
        self,
        *,
        unresolved: bool = False,
        type: Optional[str] = None,
        severity: Optional[str] = None,
    ) -> List[Alert]:
        alerts = self.store.list_alerts()
        if unresolved:
            alerts = [a for a in alerts if a.resolved_at is None]
        if type:
            alerts = [a for a in alerts if a.type == type]
        if severity:
            alerts = [a for a in alerts if a.severity == severity]
        alerts.sort(key=lambda a: a.triggered_at, reverse=True)
        alerts.sort(key=lambda a: ALERT_SEVERITY_ORDER[a.severity])
        return alerts

    def _load_alert(self, alert_id: str) -> Alert:
        alert = self.store.get_alert(alert_id)
        if alert is None:
            raise NotFound("alert", alert_id)
        return alert

    def acknowledge_alert(self, alert_id: str, actor: str) -> Alert:
        with self.locks.hold(f"alert:{alert_id}"):
            alert = self._load_alert(alert_id)
            if alert.acknowledged_at is not None:
                raise InvalidTransition(f"alert {alert_id} already acknowledged")
            alert.acknowledged_at = self._now()
            alert.acknowledged_by = actor
            self.store.put_alert(alert)
        return alert

    def resolve_alert(self, alert_id: str) -> Alert:
        with self.locks.hold(f"alert:{alert_id}"):
            alert = self._load_alert(alert_id)
            if alert.resolved_at is not None:
                raise InvalidTransition(f"alert {alert_id} already resolved")
            alert.resolved_at = self._now()
            self.store.put_alert(alert)
        return alert

    # ---------------- campaigns ----------------
    def create_campaign(self, params: Any) -> Campaign:
        data = _coerce(CampaignIn, params, "campaign")
        validate_area(data.area)
        campaign = Campaign(**data.model_dump(), id=self.ids.new("campaign"))
        self.store.put_campaign(campaign)
        return campaign

    def get_campaigns(self, *, status: Optional[str] = None) -> List[Campaign]:
        campaigns = self.store.list_campaigns()
        if status:
            campaigns = [c for c in campaigns if c.status == status]
        return sorted(campaigns, key=lambda c: (c.start_date, c.id))

    def update_campaign_status(self, campaign_id: str, status: str) -> Campaign:
        if status not in ("draft", "active", "paused", "completed"):
            raise ValidationError(f"invalid campaign status: {status}")
        with self.locks.hold(f"campaign:{campaign_id}"):
            campaign = self.store.get_campaign(campaign_id)
            if campaign is None:
                raise NotFound("campaign", campaign_id)
            campaign.status = status
            self.store.put_campaign(campaign)
        return campaign

    # ---------------- analytics ----------------
    def get_analytics(self, start: datetime, end: datetime) -> Dict[str, Any]:
        start, end = as_utc(start), as_utc(end)
        if end < start:
            raise ValidationError("analytics period end is before start")
        return build_analytics(
            self.store.reports_between(start, end),
            self.store.list_trends(),
            start=start,
            end=end,
            now=self._now(),
            hotspot_resolution=self.policy.hotspot_resolution,
        )

    def get_statistics(self) -> Dict[str, Any]:
        now = self._now()
        reports = self.store.all_reports()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_ago = now - timedelta(days=7)

        by_type: Dict[str, int] = {}
        by_status: Dict[str, int] = {}
        by_priority: Dict[str, int] = {}
        for r in reports:
            by_type[r.type] = by_type.get(r.type, 0) + 1
            by_status[r.status] = by_status.get(r.status, 0) + 1
            by_priority[r.priority] = by_priority.get(r.priority, 0) + 1

        return {
            "total_reports": len(reports),
            "by_type": by_type,
            "by_status": by_status,
            "by_priority": by_priority,
            "verification_rate": verification_rate(reports),
            "total_reporters": self.store.count_reporters(),
            "active_campaigns": len(self.get_campaigns(status="active")),
            "unresolved_alerts": len(self.get_alerts(unresolved=True)),
            "reports_today": sum(1 for r in reports if r.created_at >= today),
            "reports_this_week": sum(1 for r in reports if r.created_at >= week_ago),
        }
