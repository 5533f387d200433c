"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict
from typing import Mapping, Sequence

from ...models.domain import Point
from ..routing.models import DriverRoute, RouteResult


def route_result_to_json(result: RouteResult) -> dict:
    return {
        "ordered_ids": list(result.ordered_ids),
        "total_distance_km": result.total_distance_km,
        "total_duration_minutes": result.total_duration_minutes,
        "strategy": result.strategy,
        "degraded": result.degraded,
        "fallbacks": list(result.fallbacks),
        "legs": [asdict(leg) for leg in result.legs],
    }


def driver_routes_to_json(routes: Sequence[DriverRoute]) -> dict:
    return {
        "driver_count": len(routes),
        "total_distance_km": sum(route.route.total_distance_km for route in routes),
        "drivers": [
            {
                "driver_index": route.driver_index,
                "driver_id": route.driver_id,
                "rebalanced": route.rebalanced,
                "route": route_result_to_json(route.route),
            }
            for route in routes
        ],
    }


def routes_to_csv(
    routes: Sequence[tuple[str, RouteResult]],
    points_by_id: Mapping[str, Point],
) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "route",
        "sequence",
        "point_id",
        "address",
        "lat",
        "lng",
        "distance_from_prev_km",
        "travel_from_prev_min",
        "service_min",
        "total_distance_km",
        "total_duration_min",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for name, result in routes:
        incoming = {leg.to_id: leg for leg in result.legs}
        for sequence, point_id in enumerate(result.ordered_ids, start=1):
            point = points_by_id[point_id]
            leg = incoming.get(point_id) if sequence > 1 else None
            writer.writerow(
                {
                    "route": name,
                    "sequence": sequence,
                    "point_id": point_id,
                    "address": point.address or "",
                    "lat": point.lat,
                    "lng": point.lng,
                    "distance_from_prev_km": round(leg.distance_km, 3) if leg else 0.0,
                    "travel_from_prev_min": round(leg.duration_minutes, 1) if leg else 0.0,
                    "service_min": point.service_duration_minutes,
                    "total_distance_km": round(result.total_distance_km, 3),
                    "total_duration_min": round(result.total_duration_minutes, 1),
                }
            )
    return buffer.getvalue()
