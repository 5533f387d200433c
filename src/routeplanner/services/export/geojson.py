"""GeoJSON export utilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from shapely.geometry import LineString, mapping
from shapely.geometry import Point as ShapelyPoint

from ...models.domain import Point
from ..routing.models import RouteResult


def generate_route_color(index: int) -> str:
    """Generate distinct colors for routes."""
    colors = [
        "#02d8e0", "#e0003e", "#38e000", "#0000c1", "#e0e005",
        "#611cc7", "#e0af00", "#13aae0", "#a4d819", "#00e0bb",
    ]
    return colors[index % len(colors)]


def routes_to_feature_collection(
    routes: Sequence[tuple[str, RouteResult]],
    points_by_id: Mapping[str, Point],
) -> Dict[str, Any]:
    """Convert routes to a GeoJSON FeatureCollection.

    Each route contributes a LineString (when it has two or more stops) and
    one Point feature per stop. GeoJSON coordinates are in lon,lat order.
    """
    features: List[Dict[str, Any]] = []

    for idx, (name, result) in enumerate(routes):
        stops = [points_by_id[point_id] for point_id in result.ordered_ids]
        color = generate_route_color(idx)

        if len(stops) >= 2:
            line = LineString([(stop.lng, stop.lat) for stop in stops])
            features.append(
                {
                    "type": "Feature",
                    "geometry": mapping(line),
                    "properties": {
                        "route": name,
                        "kind": "route",
                        "strategy": result.strategy,
                        "total_distance_km": result.total_distance_km,
                        "total_duration_minutes": result.total_duration_minutes,
                        "stop_count": len(stops),
                        "stroke": color,
                    },
                }
            )

        for sequence, stop in enumerate(stops, start=1):
            features.append(
                {
                    "type": "Feature",
                    "geometry": mapping(ShapelyPoint(stop.lng, stop.lat)),
                    "properties": {
                        "route": name,
                        "kind": "stop",
                        "id": stop.id,
                        "name": stop.label,
                        "sequence": sequence,
                        "marker-color": color,
                    },
                }
            )

    return {"type": "FeatureCollection", "features": features}


def save_geojson(collection: Dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(collection, f, indent=2, ensure_ascii=False)
