"""Distance and duration accounting shared by every routing strategy.

A route's duration is the travel time of each leg plus the service time of
every stop reached by a leg. The first stop's service time is not counted, so
a single-stop route always takes zero minutes.
"""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...models.domain import Point
from ..geospatial import haversine_km
from .models import RouteLeg, RouteResult


def travel_minutes(distance_km: float, speed_kmh: float | None = None) -> float:
    speed = speed_kmh or settings.average_speed_kmh
    return distance_km / speed * 60.0


def leg_distance_km(origin: Point, destination: Point) -> float:
    return haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)


def route_distance_km(route: Sequence[Point]) -> float:
    """Total straight-line length of a route visited in the given order."""
    return sum(leg_distance_km(route[k], route[k + 1]) for k in range(len(route) - 1))


def service_minutes_after_first(route: Sequence[Point]) -> float:
    return sum(point.service_duration_minutes or 0.0 for point in route[1:])


def summarize_route(
    route: Sequence[Point],
    *,
    strategy: str,
    speed_kmh: float | None = None,
) -> RouteResult:
    """Build a RouteResult for points already placed in visiting order."""
    if len(route) < 2:
        return RouteResult(
            ordered_ids=tuple(point.id for point in route),
            total_distance_km=0.0,
            total_duration_minutes=0.0,
            legs=(),
            strategy="trivial",
        )

    legs: list[RouteLeg] = []
    total_distance = 0.0
    total_travel = 0.0
    for origin, destination in zip(route, route[1:]):
        distance = leg_distance_km(origin, destination)
        duration = travel_minutes(distance, speed_kmh)
        total_distance += distance
        total_travel += duration
        legs.append(
            RouteLeg(
                from_id=origin.id,
                to_id=destination.id,
                distance_km=distance,
                duration_minutes=duration,
            )
        )

    return RouteResult(
        ordered_ids=tuple(point.id for point in route),
        total_distance_km=total_distance,
        total_duration_minutes=total_travel + service_minutes_after_first(route),
        legs=tuple(legs),
        strategy=strategy,
    )


def resolve_start(points: Sequence[Point], start: Point | None) -> Point | None:
    """Pick the point a route begins at.

    A start that belongs to the set is used as-is; a start from outside the set
    (a driver's home, a depot) selects the closest point of the set.
    """
    if not points:
        return None
    if start is None:
        return points[0]
    for point in points:
        if point.id == start.id:
            return point
    return min(points, key=lambda point: haversine_km(start.lat, start.lng, point.lat, point.lng))


def move_to_front(points: Sequence[Point], first: Point) -> list[Point]:
    return [first, *(point for point in points if point.id != first.id)]
