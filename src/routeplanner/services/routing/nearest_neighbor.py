"""Greedy nearest-neighbour route construction."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Point
from .accounting import leg_distance_km, move_to_front, resolve_start, summarize_route
from .models import RouteResult


def nearest_neighbor_order(points: Sequence[Point], start: Point | None = None) -> list[Point]:
    """Visit order obtained by always advancing to the closest unvisited point.

    Ties go to the point that comes first in the remaining input order.
    """
    first = resolve_start(points, start)
    if first is None:
        return []
    return extend_nearest_neighbor([first], move_to_front(points, first)[1:])


def extend_nearest_neighbor(route: list[Point], remaining: Sequence[Point]) -> list[Point]:
    """Append ``remaining`` to ``route`` greedily, each time picking the point nearest the tail."""
    ordered = list(route)
    unvisited = list(remaining)
    while unvisited:
        current = ordered[-1]
        nearest_index = 0
        nearest_distance = leg_distance_km(current, unvisited[0])
        for index in range(1, len(unvisited)):
            distance = leg_distance_km(current, unvisited[index])
            if distance < nearest_distance:
                nearest_distance = distance
                nearest_index = index
        ordered.append(unvisited.pop(nearest_index))
    return ordered


def nearest_neighbor_route(points: Sequence[Point], start: Point | None = None) -> RouteResult:
    if not points:
        return RouteResult.empty()
    return summarize_route(nearest_neighbor_order(points, start), strategy="nearest_neighbor")
