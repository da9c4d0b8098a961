from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from crowdreport.dependencies import get_engine
from crowdreport.models.alert import Alert, AlertSeverity
from crowdreport.services.engine import ReportingEngine

router = APIRouter(prefix="/alerts", tags=["alerts"])


class AcknowledgeBody(BaseModel):
    actor: str


@router.get("", response_model=List[Alert])
def list_alerts(
    unresolved: bool = Query(False, description="Only alerts that are not resolved yet"),
    type: Optional[Literal["cluster", "spike", "critical", "trending", "unverified"]] = Query(None),
    severity: Optional[AlertSeverity] = Query(None),
    engine: ReportingEngine = Depends(get_engine),
):
    """Alerts, most severe first, newest first within a severity."""
    return engine.get_alerts(unresolved=unresolved, type=type, severity=severity)


@router.post("/{alert_id}/acknowledge", response_model=Alert)
def acknowledge(alert_id: str, body: AcknowledgeBody, engine: ReportingEngine = Depends(get_engine)):
    return engine.acknowledge_alert(alert_id, body.actor)


@router.post("/{alert_id}/resolve", response_model=Alert)
def resolve(alert_id: str, engine: ReportingEngine = Depends(get_engine)):
    return engine.resolve_alert(alert_id)
