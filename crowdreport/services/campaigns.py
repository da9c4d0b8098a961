# crowdreport/services/campaigns.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from shapely.geometry import Point, Polygon

from crowdreport.errors import ValidationError
from crowdreport.models.campaign import Campaign, CampaignArea
from crowdreport.services.clock import as_utc
from crowdreport.services.h3_utils import haversine_km


def validate_area(area: CampaignArea) -> None:
    if area.type == "radius":
        if area.center is None or area.radius is None:
            raise ValidationError("radius campaign area needs center and radius")
    elif not area.polygon or len(area.polygon) < 3:
        raise ValidationError("polygon campaign area needs at least 3 points")


def _area_polygon(area: CampaignArea) -> Optional[Polygon]:
    if not area.polygon:
        return None
    # shapely is (x=lng, y=lat)
    return Polygon([(p.lon, p.lat) for p in area.polygon])


def area_contains(area: CampaignArea, lat: float, lon: float) -> bool:
    if area.type == "radius":
        if area.center is None or area.radius is None:
            return False
        return haversine_km(area.center.lat, area.center.lon, lat, lon) <= area.radius
    poly = _area_polygon(area)
    return poly is not None and poly.covers(Point(lon, lat))


def record_participation(campaign: Campaign, reporter_id: str) -> None:
    campaign.current_reports += 1
    if reporter_id not in campaign.participants:
        campaign.participants.append(reporter_id)


def is_open(campaign: Campaign, when: datetime) -> bool:
    """Active and inside its start/end dates."""
    if campaign.status != "active" or as_utc(when) < as_utc(campaign.start_date):
        return False
    return campaign.end_date is None or as_utc(when) <= as_utc(campaign.end_date)
