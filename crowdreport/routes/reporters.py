from fastapi import APIRouter, Depends

from crowdreport.dependencies import get_engine
from crowdreport.models.reporter import Reporter
from crowdreport.services.engine import ReportingEngine

router = APIRouter(prefix="/reporters", tags=["reporters"])


@router.get("/{reporter_id}", response_model=Reporter)
def get_reporter(reporter_id: str, engine: ReportingEngine = Depends(get_engine)):
    """Reputation ledger entry of one reporter."""
    return engine.get_reporter(reporter_id)
