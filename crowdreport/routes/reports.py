from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from crowdreport.dependencies import get_engine
from crowdreport.models.report import (
    ActorType,
    AssignmentIn,
    AssignmentStatus,
    CommentIn,
    FlagIn,
    LocationIn,
    MediaIn,
    Priority,
    Report,
    ReportComment,
    ReporterIn,
    ReportSource,
    ReportStatus,
    ReportType,
    VerificationStatus,
    VerifierIn,
    VoteKind,
)
from crowdreport.services.engine import ReportingEngine

router = APIRouter(prefix="/reports", tags=["reports"])


# ---------- Request bodies ----------

class ReportIn(BaseModel):
    type: ReportType
    category: str
    subcategory: Optional[str] = None
    title: str
    description: str
    location: LocationIn
    reporter: ReporterIn = Field(default_factory=ReporterIn)
    media: List[MediaIn] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    source: ReportSource = "mobile_app"


class ReportUpdate(BaseModel):
    actor: str
    actor_type: ActorType = "official"
    status: Optional[ReportStatus] = None
    priority: Optional[Priority] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None


class VerifyBody(VerifierIn):
    status: VerificationStatus
    notes: str = ""


class VoteBody(BaseModel):
    principal_id: str
    vote: VoteKind


class ResolveFlagBody(BaseModel):
    resolution: str
    actor: str


class AssignmentStatusBody(BaseModel):
    status: AssignmentStatus
    notes: Optional[str] = None


class MergeBody(BaseModel):
    duplicate_ids: List[str]
    actor: str


class ReportPage(BaseModel):
    reports: List[Report]
    total: int


# ---------- Reports ----------

@router.post("", response_model=Report, status_code=201)
def submit_report(body: ReportIn, engine: ReportingEngine = Depends(get_engine)):
    """
    Submit a citizen report. Classification, auto-verification, duplicate
    linking, trend detection and alerting all happen before this returns.
    """
    return engine.submit_report(
        type=body.type,
        category=body.category,
        subcategory=body.subcategory,
        title=body.title,
        description=body.description,
        location=body.location,
        reporter=body.reporter,
        media=body.media,
        tags=body.tags,
        source=body.source,
    )


@router.get("", response_model=ReportPage)
def list_reports(
    type: Optional[ReportType] = Query(None),
    status: Optional[ReportStatus] = Query(None),
    priority: Optional[Priority] = Query(None),
    verified: Optional[bool] = Query(None, description="Only (un)verified reports"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    radius_km: Optional[float] = Query(None, gt=0, description="Search radius around lat/lon"),
    reporter_id: Optional[str] = Query(None),
    tags: Optional[List[str]] = Query(None, description="Match any of these tags"),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    engine: ReportingEngine = Depends(get_engine),
):
    location = None
    given = [v is not None for v in (lat, lon, radius_km)]
    if any(given):
        if not all(given):
            raise HTTPException(status_code=422, detail="lat, lon and radius_km must be given together")
        location = (lat, lon, radius_km)

    date_range = None
    if start is not None or end is not None:
        if start is None or end is None:
            raise HTTPException(status_code=422, detail="start and end must be given together")
        date_range = (start, end)

    return engine.get_reports(
        type=type,
        status=status,
        priority=priority,
        verified=verified,
        location=location,
        reporter_id=reporter_id,
        tags=tags,
        date_range=date_range,
        limit=limit,
        offset=offset,
    )


@router.get("/{report_id}", response_model=Report)
def get_report(report_id: str, engine: ReportingEngine = Depends(get_engine)):
    return engine.get_report(report_id)


@router.patch("/{report_id}", response_model=Report)
def update_report(report_id: str, body: ReportUpdate, engine: ReportingEngine = Depends(get_engine)):
    return engine.update_report(report_id, **body.model_dump())


# ---------- Verification / community ----------

@router.post("/{report_id}/verify", response_model=Report)
def verify_report(report_id: str, body: VerifyBody, engine: ReportingEngine = Depends(get_engine)):
    verifier = VerifierIn(verifier_id=body.verifier_id, verifier_name=body.verifier_name, verifier_org=body.verifier_org)
    return engine.verify_report(report_id, verifier, body.status, body.notes)


@router.post("/{report_id}/votes", response_model=Report)
def vote(report_id: str, body: VoteBody, engine: ReportingEngine = Depends(get_engine)):
    return engine.vote_on_report(report_id, body.principal_id, body.vote)


@router.post("/{report_id}/flags", response_model=Report)
def flag(report_id: str, body: FlagIn, engine: ReportingEngine = Depends(get_engine)):
    return engine.flag_report(report_id, body)


@router.post("/{report_id}/flags/{flag_id}/resolve", response_model=Report)
def resolve_flag(report_id: str, flag_id: str, body: ResolveFlagBody, engine: ReportingEngine = Depends(get_engine)):
    return engine.resolve_flag(report_id, flag_id, body.resolution, body.actor)


# ---------- Response workflow ----------

@router.post("/{report_id}/assignment", response_model=Report)
def assign(report_id: str, body: AssignmentIn, engine: ReportingEngine = Depends(get_engine)):
    return engine.assign_report(report_id, body)


@router.patch("/{report_id}/assignment", response_model=Report)
def update_assignment(report_id: str, body: AssignmentStatusBody, engine: ReportingEngine = Depends(get_engine)):
    return engine.update_assignment_status(report_id, body.status, body.notes)


@router.post("/{report_id}/comments", response_model=ReportComment, status_code=201)
def comment(report_id: str, body: CommentIn, engine: ReportingEngine = Depends(get_engine)):
    return engine.add_comment(report_id, body)


@router.post("/{report_id}/merge", response_model=Report)
def merge(report_id: str, body: MergeBody, engine: ReportingEngine = Depends(get_engine)):
    """Merge `duplicate_ids` into this report."""
    return engine.merge_reports(report_id, body.duplicate_ids, body.actor)
