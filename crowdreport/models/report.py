from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

ReportType = Literal[
    "incident", "damage", "hazard", "resource_need", "missing_person",
    "infrastructure", "safety", "wildlife", "environmental", "other",
]
ReportStatus = Literal[
    "submitted", "under_review", "verified", "actionable",
    "assigned", "resolved", "rejected", "duplicate",
]
Priority = Literal["low", "medium", "high", "critical"]
VerificationStatus = Literal["pending", "verified", "partially_verified", "unverified", "conflicting"]
MediaType = Literal["photo", "video", "audio", "document"]
CredibilityLevel = Literal["new", "bronze", "silver", "gold", "platinum", "verified_official"]
SentimentLabel = Literal["very_positive", "positive", "neutral", "negative", "very_negative"]
VoteKind = Literal["up", "down", "confirm", "dispute"]
FlagType = Literal["spam", "misinformation", "duplicate", "inappropriate", "location_mismatch", "outdated"]
AssignmentStatus = Literal["pending", "acknowledged", "in_progress", "completed", "escalated"]
ActorType = Literal["system", "reporter", "official", "responder", "moderator"]
TimelineEventType = Literal[
    "created", "updated", "verified", "assigned", "status_change", "comment",
    "media_added", "location_updated", "merged", "resolved",
]
ReportSource = Literal["mobile_app", "web", "sms", "voice", "social_media", "api"]

PRIORITY_ORDER: Dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}
TERMINAL_STATUSES = frozenset({"rejected", "duplicate"})


# ---------- Location / reporter / media ----------

class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lon: float = Field(..., ge=-180, le=180, description="Longitude")


class ReportLocation(BaseModel):
    coordinates: Coordinates
    accuracy: float = Field(..., ge=0, description="Accuracy radius in meters")
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    landmark: Optional[str] = None
    description: Optional[str] = None
    geocode_source: Literal["gps", "manual", "geocoded", "ip"] = "gps"


class ReporterInfo(BaseModel):
    """Denormalized reporter snapshot taken at submission time."""
    id: str
    type: Literal["anonymous", "registered", "verified", "official"] = "anonymous"
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    credibility_score: float = Field(50, ge=0, le=100)
    credibility_level: CredibilityLevel = "new"
    total_reports: int = 0
    verified_reports: int = 0
    organization: Optional[str] = None
    role: Optional[str] = None


class MediaMetadata(BaseModel):
    captured_at: Optional[datetime] = None
    device: Optional[str] = None
    geotagged: bool = False
    coordinates: Optional[Coordinates] = None


class ReportMedia(BaseModel):
    id: str
    type: MediaType
    url: str
    filename: str
    size: int = Field(..., ge=0, description="Bytes")
    mime_type: str
    thumbnail_url: Optional[str] = None
    duration: Optional[float] = None
    metadata: Optional[MediaMetadata] = None
    verified: bool = False
    uploaded_at: datetime


# ---------- Classification ----------

class KeywordHit(BaseModel):
    word: str
    sentiment: SentimentLabel
    frequency: int


class Emotions(BaseModel):
    anger: float = 0.0
    fear: float = 0.0
    sadness: float = 0.0
    joy: float = 0.0
    surprise: float = 0.0
    trust: float = 0.0


class SentimentProfile(BaseModel):
    overall: SentimentLabel = "neutral"
    score: float = Field(0.0, ge=-1, le=1)
    confidence: float = Field(50, ge=0, le=100)
    emotions: Emotions = Field(default_factory=Emotions)
    keywords: List[KeywordHit] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)


class ReportAnalysis(BaseModel):
    keywords: List[str] = Field(default_factory=list)
    suggested_priority: Priority = "low"
    confidence: float = 50


class ReportMetadata(BaseModel):
    source: ReportSource = "mobile_app"
    language_code: str = "en"
    translated: bool = False
    urgency_score: int = Field(0, ge=0, le=100)
    impact_score: int = Field(0, ge=0, le=100)
    sentiment: SentimentProfile = Field(default_factory=SentimentProfile)
    analysis: ReportAnalysis = Field(default_factory=ReportAnalysis)


# ---------- Verification ----------

class AutoVerification(BaseModel):
    location_match: bool = False
    media_analysis: bool = False
    text_analysis: bool = False
    cross_reference: bool = False


class CommunityVerification(BaseModel):
    upvotes: int = 0
    downvotes: int = 0
    corroborations: int = 0


class OfficialVerification(BaseModel):
    verifier_id: str
    verifier_name: str
    verifier_org: str
    timestamp: datetime
    notes: str = ""


class VerificationFlag(BaseModel):
    id: str
    type: FlagType
    reported_by: str
    reported_at: datetime
    reason: str = ""
    resolved: bool = False
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None


class VerificationInfo(BaseModel):
    status: VerificationStatus = "pending"
    score: float = Field(0, ge=0, le=100)
    method: List[str] = Field(default_factory=list)
    verified_by: List[str] = Field(default_factory=list)
    verified_at: Optional[datetime] = None
    auto_verification: AutoVerification = Field(default_factory=AutoVerification)
    community_verification: CommunityVerification = Field(default_factory=CommunityVerification)
    official_verification: Optional[OfficialVerification] = None
    flags: List[VerificationFlag] = Field(default_factory=list)

    def unresolved_flags(self) -> int:
        return sum(1 for f in self.flags if not f.resolved)


# ---------- Engagement ----------

class Vote(BaseModel):
    principal_id: str
    vote: VoteKind
    timestamp: datetime


class VoteInfo(BaseModel):
    upvotes: int = 0
    downvotes: int = 0
    confirmations: int = 0
    disputations: int = 0
    voters: List[Vote] = Field(default_factory=list)

    def has_voted(self, principal_id: str) -> bool:
        return any(v.principal_id == principal_id for v in self.voters)


class ReportComment(BaseModel):
    id: str
    author_id: str
    author_name: str
    author_type: Literal["citizen", "official", "responder", "moderator"] = "citizen"
    content: str
    is_official: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None
    replies: List["ReportComment"] = Field(default_factory=list)
    likes: int = 0
    flags: int = 0


class TimelineEvent(BaseModel):
    id: str
    type: TimelineEventType
    timestamp: datetime
    actor: str
    actor_type: ActorType
    description: str
    details: Optional[Dict[str, Any]] = None


class AssignmentInfo(BaseModel):
    assigned_to: str
    assigned_by: str
    assigned_at: datetime
    organization: str
    team: Optional[str] = None
    priority: Priority = "medium"
    deadline: Optional[datetime] = None
    status: AssignmentStatus = "pending"
    notes: str = ""


# ---------- Report ----------

class Report(BaseModel):
    id: str
    type: ReportType
    category: str
    subcategory: Optional[str] = None
    status: ReportStatus = "submitted"
    priority: Priority = "low"
    title: str
    description: str
    location: ReportLocation
    reporter: ReporterInfo
    media: List[ReportMedia] = Field(default_factory=list)
    verification: VerificationInfo = Field(default_factory=VerificationInfo)
    assignment: Optional[AssignmentInfo] = None
    related_reports: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    votes: VoteInfo = Field(default_factory=VoteInfo)
    comments: List[ReportComment] = Field(default_factory=list)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)
    geo_cell: str = Field("", description="H3 cell of the report location (geo index bucket)")
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime] = None

    @property
    def lat(self) -> float:
        return self.location.coordinates.lat

    @property
    def lon(self) -> float:
        return self.location.coordinates.lon

    def add_related(self, report_id: str) -> None:
        if report_id != self.id and report_id not in self.related_reports:
            self.related_reports.append(report_id)


# ---------- Inputs (payloads coming FROM the client) ----------

class LocationIn(BaseModel):
    coordinates: Optional[Coordinates] = None
    accuracy: float = Field(100, ge=0)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    landmark: Optional[str] = None
    description: Optional[str] = None
    geocode_source: Optional[Literal["gps", "manual", "geocoded", "ip"]] = None


class ReporterIn(BaseModel):
    id: Optional[str] = None
    type: Optional[Literal["anonymous", "registered", "verified", "official"]] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    credibility_score: Optional[float] = Field(None, ge=0, le=100)
    credibility_level: Optional[CredibilityLevel] = None
    organization: Optional[str] = None
    role: Optional[str] = None


class MediaIn(BaseModel):
    type: MediaType
    url: str
    filename: str
    size: int = Field(..., ge=0)
    mime_type: str
    thumbnail_url: Optional[str] = None
    duration: Optional[float] = None
    metadata: Optional[MediaMetadata] = None


class FlagIn(BaseModel):
    type: FlagType
    reported_by: str
    reason: str = ""


class AssignmentIn(BaseModel):
    assigned_to: str
    assigned_by: str
    organization: str
    team: Optional[str] = None
    priority: Priority = "medium"
    deadline: Optional[datetime] = None
    notes: str = ""


class CommentIn(BaseModel):
    author_id: str
    author_name: str
    author_type: Literal["citizen", "official", "responder", "moderator"] = "citizen"
    content: str = Field(..., min_length=1)
    is_official: bool = False


class VerifierIn(BaseModel):
    verifier_id: str
    verifier_name: str
    verifier_org: str
