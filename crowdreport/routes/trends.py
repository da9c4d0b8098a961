from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from crowdreport.dependencies import get_engine
from crowdreport.models.trend import Trend, TrendSeverity, TrendStatus
from crowdreport.services.engine import ReportingEngine

router = APIRouter(prefix="/trends", tags=["trends"])


class TrendStatusBody(BaseModel):
    status: TrendStatus


@router.get("", response_model=List[Trend])
def list_trends(
    category: Optional[str] = Query(None),
    type: Optional[Literal["emerging", "ongoing", "declining", "resolved"]] = Query(None),
    status: Optional[TrendStatus] = Query(None),
    min_severity: Optional[TrendSeverity] = Query(None, description="Lowest severity to include"),
    engine: ReportingEngine = Depends(get_engine),
):
    return engine.get_trends(category=category, type=type, status=status, min_severity=min_severity)


@router.patch("/{trend_id}", response_model=Trend)
def update_trend(trend_id: str, body: TrendStatusBody, engine: ReportingEngine = Depends(get_engine)):
    return engine.update_trend_status(trend_id, body.status)
