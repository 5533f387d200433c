"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def coordinate_centroid(coordinates: Sequence[tuple[float, float]]) -> tuple[float, float]:
    """Coordinate-wise mean of (lat, lon) pairs."""

    if not coordinates:
        raise ValueError("At least one coordinate is required for a centroid.")
    lat = sum(c[0] for c in coordinates) / len(coordinates)
    lon = sum(c[1] for c in coordinates) / len(coordinates)
    return (lat, lon)
