from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query

from crowdreport.dependencies import get_engine
from crowdreport.services.engine import ReportingEngine

router = APIRouter(tags=["analytics"])

DEFAULT_PERIOD_DAYS = 30


@router.get("/analytics")
def analytics(
    start: Optional[datetime] = Query(None, description="Period start (default: 30 days before end)"),
    end: Optional[datetime] = Query(None, description="Period end (default: now)"),
    engine: ReportingEngine = Depends(get_engine),
):
    end = end or engine.clock.now()
    start = start or end - timedelta(days=DEFAULT_PERIOD_DAYS)
    return engine.get_analytics(start, end)


@router.get("/statistics")
def statistics(engine: ReportingEngine = Depends(get_engine)):
    return engine.get_statistics()
