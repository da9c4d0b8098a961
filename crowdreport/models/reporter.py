from __future__ import annotations

from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from crowdreport.models.report import CredibilityLevel


class ReporterProfile(BaseModel):
    display_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    organization: Optional[str] = None
    role: Optional[str] = None


class ReporterActivity(BaseModel):
    total_reports: int = 0
    verified_reports: int = 0
    rejected_reports: int = 0
    total_votes: int = 0
    comments_posted: int = 0
    last_active: Optional[datetime] = None
    reports_by_category: Dict[str, int] = Field(default_factory=dict)


class ReputationFactors(BaseModel):
    accuracy: float = 50
    timeliness: float = 50
    helpfulness: float = 50
    consistency: float = 50


class ReputationInfo(BaseModel):
    score: float = Field(100, ge=0)
    level: CredibilityLevel = "new"
    trend: Literal["rising", "stable", "declining"] = "stable"
    factors: ReputationFactors = Field(default_factory=ReputationFactors)


class Reporter(BaseModel):
    id: str
    type: Literal["anonymous", "registered", "verified", "official"] = "registered"
    profile: ReporterProfile = Field(default_factory=ReporterProfile)
    activity: ReporterActivity = Field(default_factory=ReporterActivity)
    reputation: ReputationInfo = Field(default_factory=ReputationInfo)
    created_at: datetime
    updated_at: datetime
