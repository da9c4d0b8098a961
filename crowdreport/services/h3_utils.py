"""
H3 and distance helpers used across the project.
"""
from __future__ import annotations

import math
from typing import List, Tuple

import h3  # h3>=4

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dl / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def point_to_hex(lat: float, lng: float, resolution: int = 8) -> str:
    """Return the H3 cell id for (lat, lng) at the given resolution."""
    return h3.latlng_to_cell(lat, lng, resolution)


def hex_to_center(hex_id: str) -> Tuple[float, float]:
    """Return (lat, lng) of the center of an H3 cell."""
    return h3.cell_to_latlng(hex_id)


def hex_to_parent(hex_id: str, resolution: int) -> str:
    if h3.get_resolution(hex_id) <= resolution:
        return hex_id
    return h3.cell_to_parent(hex_id, resolution)


def rings_for_radius(radius_km: float, resolution: int) -> int:
    """
    Smallest grid_disk k that is guaranteed to contain every cell holding a
    point within radius_km of a point in the origin cell.

    Both points sit at most one edge length from their cell centers and
    adjacent centers are at least 1.5 edge lengths apart along the grid, so
    k = ceil((r + 2*edge) / (1.5*edge)); one extra ring absorbs the size
    distortion of H3 cells away from the average.
    """
    edge = h3.average_hexagon_edge_length(resolution, unit="km")
    return int(math.ceil((radius_km + 2 * edge) / (1.5 * edge))) + 1


def cells_within(lat: float, lng: float, radius_km: float, resolution: int) -> List[str]:
    """Cells (at `resolution`) that may contain points within radius_km of (lat, lng)."""
    origin = point_to_hex(lat, lng, resolution)
    k = rings_for_radius(radius_km, resolution)
    return list(h3.grid_disk(origin, k))
