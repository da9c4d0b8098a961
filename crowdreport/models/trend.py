from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field

TrendStatus = Literal["new", "acknowledged", "investigating", "action_taken", "closed"]
TrendSeverity = Literal["low", "medium", "high", "critical"]

# operator lifecycle, forward only
TREND_STATUS_ORDER = ("new", "acknowledged", "investigating", "action_taken", "closed")
SEVERITY_ORDER = {"low": 0, "medium": 1, "high": 2, "critical": 3}


class Trend(BaseModel):
    id: str
    name: str
    category: str
    type: Literal["emerging", "ongoing", "declining", "resolved"] = "emerging"
    severity: TrendSeverity = "low"
    description: str = ""
    report_ids: List[str] = Field(default_factory=list)
    report_count: int = 0
    sentiment: Literal["positive", "neutral", "negative"] = "neutral"
    keywords: List[str] = Field(default_factory=list)
    first_seen: datetime
    last_seen: datetime
    status: TrendStatus = "new"
