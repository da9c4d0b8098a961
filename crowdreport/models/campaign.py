from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from crowdreport.models.report import Coordinates

CampaignStatus = Literal["draft", "active", "paused", "completed"]


class CampaignArea(BaseModel):
    type: Literal["polygon", "radius"]
    center: Optional[Coordinates] = None
    radius: Optional[float] = Field(None, gt=0, description="Kilometers")
    polygon: Optional[List[Coordinates]] = None


class CampaignQuestion(BaseModel):
    id: str
    question: str
    type: Literal["text", "number", "choice", "multichoice", "rating", "photo"] = "text"
    required: bool = False
    options: Optional[List[str]] = None


class CampaignIn(BaseModel):
    name: str
    description: str = ""
    type: Literal["damage_assessment", "needs_survey", "safety_check", "resource_mapping", "custom"] = "custom"
    status: CampaignStatus = "draft"
    area: CampaignArea
    target_reports: int = Field(0, ge=0)
    questions: List[CampaignQuestion] = Field(default_factory=list)
    incentives: List[str] = Field(default_factory=list)
    start_date: datetime
    end_date: Optional[datetime] = None
    created_by: str


class Campaign(CampaignIn):
    id: str
    current_reports: int = 0
    participants: List[str] = Field(default_factory=list)
