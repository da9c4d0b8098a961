"""
Shared fixtures: a manual clock, deterministic ids, an in-memory store and an
engine wired to all three.
"""

from datetime import datetime, timezone
from typing import Any, Dict

import pytest

from crowdreport.config import Policy, load_lexicon
from crowdreport.db.memory import MemoryReportStore
from crowdreport.models.report import Coordinates, Report, ReporterInfo, ReportLocation
from crowdreport.services.clock import ManualClock, SequentialIdGenerator
from crowdreport.services.engine import ReportingEngine

T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

# downtown Los Angeles
LAT, LON = 34.0522, -118.2437

LONG_TEXT = "Large pothole near the corner of Main and 5th, cars swerving around it all morning"


# ============================================================================
# CORE FIXTURES
# ============================================================================

@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(T0)


@pytest.fixture
def ids() -> SequentialIdGenerator:
    return SequentialIdGenerator()


@pytest.fixture
def store() -> MemoryReportStore:
    return MemoryReportStore()


@pytest.fixture
def policy() -> Policy:
    return Policy()


@pytest.fixture(scope="session")
def lexicon():
    return load_lexicon()


@pytest.fixture
def published():
    """Alerts handed to the engine's publisher, in order."""
    return []


@pytest.fixture
def engine(store, clock, ids, policy, lexicon, published) -> ReportingEngine:
    return ReportingEngine(store, lexicon=lexicon, policy=policy, clock=clock, ids=ids, publisher=published.append)


# ============================================================================
# HELPERS
# ============================================================================

def location(lat: float = LAT, lon: float = LON, accuracy: float = 100) -> Dict[str, Any]:
    return {"coordinates": {"lat": lat, "lon": lon}, "accuracy": accuracy}


def geotagged_photo() -> Dict[str, Any]:
    return {
        "type": "photo",
        "url": "https://cdn.example.com/p1.jpg",
        "filename": "p1.jpg",
        "size": 2048,
        "mime_type": "image/jpeg",
        "metadata": {"geotagged": True},
    }


@pytest.fixture
def submit(engine):
    """engine.submit_report with neutral defaults (low priority, no keywords)."""

    def _submit(**overrides) -> Report:
        params: Dict[str, Any] = {
            "type": "hazard",
            "category": "road",
            "title": "Pothole",
            "description": "Large pothole near the corner",
            "location": location(),
            "reporter": {"id": "u-1"},
        }
        params.update(overrides)
        return engine.submit_report(**params)

    return _submit


@pytest.fixture
def make_report():
    """Build a Report directly, without going through the engine."""

    def _make(**overrides) -> Report:
        fields: Dict[str, Any] = {
            "id": "report-x",
            "type": "hazard",
            "category": "road",
            "title": "Pothole",
            "description": "Large pothole near the corner",
            "location": ReportLocation(coordinates=Coordinates(lat=LAT, lon=LON), accuracy=100),
            "reporter": ReporterInfo(id="u-1", type="registered"),
            "created_at": T0,
            "updated_at": T0,
        }
        fields.update(overrides)
        return Report(**fields)

    return _make
