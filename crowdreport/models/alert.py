from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

AlertSeverity = Literal["info", "warning", "critical"]
ALERT_SEVERITY_ORDER = {"critical": 0, "warning": 1, "info": 2}


class AffectedArea(BaseModel):
    lat: float
    lon: float
    radius: float = Field(..., description="Radius in kilometers")


class Alert(BaseModel):
    id: str
    type: Literal["cluster", "spike", "critical", "trending", "unverified"]
    severity: AlertSeverity
    title: str
    description: str
    affected_area: Optional[AffectedArea] = None
    report_ids: List[str] = Field(default_factory=list)
    triggered_at: datetime
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
