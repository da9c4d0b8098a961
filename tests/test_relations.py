"""
Relation finder and H3 helper tests.
"""

from datetime import timedelta

import pytest

from conftest import LAT, LON, T0
from crowdreport.config import Policy
from crowdreport.models.report import Coordinates, ReportLocation
from crowdreport.services.h3_utils import (
    cells_within,
    haversine_km,
    point_to_hex,
    rings_for_radius,
)
from crowdreport.services.relations import find_related, is_related

# ~200 m north of (LAT, LON)
NEAR_LAT = LAT + 0.0018
# ~2 km north
FAR_LAT = LAT + 0.018


def _at(lat: float, lon: float = LON) -> ReportLocation:
    return ReportLocation(coordinates=Coordinates(lat=lat, lon=lon), accuracy=100)


# ============================================================================
# GEOMETRY
# ============================================================================

class TestGeometry:

    def test_haversine_zero(self):
        assert haversine_km(LAT, LON, LAT, LON) == 0.0

    def test_haversine_200m(self):
        assert haversine_km(LAT, LON, NEAR_LAT, LON) == pytest.approx(0.2, abs=0.01)

    def test_one_degree_latitude(self):
        assert haversine_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)

    def test_cells_within_covers_points_inside_radius(self):
        cells = set(cells_within(LAT, LON, 0.5, 8))
        for dlat, dlon in [(0.004, 0), (-0.004, 0), (0, 0.005), (0, -0.005), (0.003, 0.003)]:
            lat, lon = LAT + dlat, LON + dlon
            assert haversine_km(LAT, LON, lat, lon) <= 0.5
            assert point_to_hex(lat, lon, 8) in cells

    def test_rings_grow_with_radius(self):
        assert rings_for_radius(0.5, 8) < rings_for_radius(5, 8)


# ============================================================================
# PAIRWISE RULE
# ============================================================================

class TestIsRelated:

    def test_close_in_space_time_and_type(self, make_report):
        a = make_report(id="a")
        b = make_report(id="b", location=_at(NEAR_LAT), created_at=T0 + timedelta(minutes=10))
        assert is_related(b, a, Policy())

    def test_category_match_is_enough(self, make_report):
        a = make_report(id="a", type="damage")
        b = make_report(id="b", type="hazard")
        assert is_related(b, a, Policy())

    def test_no_type_or_category_match(self, make_report):
        a = make_report(id="a", type="damage", category="structural")
        b = make_report(id="b", type="hazard", category="road")
        assert not is_related(b, a, Policy())

    def test_too_far(self, make_report):
        a = make_report(id="a")
        b = make_report(id="b", location=_at(FAR_LAT))
        assert not is_related(b, a, Policy())

    def test_too_old(self, make_report):
        a = make_report(id="a")
        b = make_report(id="b", created_at=T0 + timedelta(hours=25))
        assert not is_related(b, a, Policy())

    def test_never_related_to_itself(self, make_report):
        a = make_report(id="a")
        assert not is_related(a, a, Policy())


# ============================================================================
# INDEXED LOOKUP
# ============================================================================

class TestFindRelated:

    def test_uses_store_candidates(self, store, make_report):
        policy = Policy()
        near = make_report(id="near", location=_at(NEAR_LAT), geo_cell=point_to_hex(NEAR_LAT, LON, 8))
        far = make_report(id="far", location=_at(FAR_LAT), geo_cell=point_to_hex(FAR_LAT, LON, 8))
        old = make_report(id="old", created_at=T0 - timedelta(days=2), geo_cell=point_to_hex(LAT, LON, 8))
        for r in (near, far, old):
            store.put_report(r)

        new = make_report(id="new", created_at=T0 + timedelta(minutes=5), geo_cell=point_to_hex(LAT, LON, 8))
        assert find_related(store, new, policy) == ["near"]
