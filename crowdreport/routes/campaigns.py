from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from crowdreport.dependencies import get_engine
from crowdreport.models.campaign import Campaign, CampaignIn, CampaignStatus
from crowdreport.services.engine import ReportingEngine

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


class CampaignStatusBody(BaseModel):
    status: CampaignStatus


@router.post("", response_model=Campaign, status_code=201)
def create_campaign(body: CampaignIn, engine: ReportingEngine = Depends(get_engine)):
    return engine.create_campaign(body)


@router.get("", response_model=List[Campaign])
def list_campaigns(
    status: Optional[CampaignStatus] = Query(None),
    engine: ReportingEngine = Depends(get_engine),
):
    return engine.get_campaigns(status=status)


@router.patch("/{campaign_id}", response_model=Campaign)
def update_campaign(campaign_id: str, body: CampaignStatusBody, engine: ReportingEngine = Depends(get_engine)):
    return engine.update_campaign_status(campaign_id, body.status)
