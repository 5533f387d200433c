"""Ordering for routes that contain fixed appointments.

Appointments are visited in chronological order right after the start, and
the remaining stops are threaded in afterwards by proximity. Travel time is
not reconciled with the gaps between appointment times, so a stop can be
reached later than its ``fixed_arrival_time``.
"""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Point
from .accounting import resolve_start, summarize_route
from .models import RouteResult
from .nearest_neighbor import extend_nearest_neighbor


def has_appointments(points: Sequence[Point]) -> bool:
    return any(point.has_appointment for point in points)


def windowed_order(points: Sequence[Point], start: Point | None = None) -> list[Point]:
    """Start, then appointments by time, then the rest by proximity.

    Without an explicit ``start`` an appointed first point is not pinned; it
    takes its chronological place among the other appointments.
    """
    if not points:
        return []
    if start is None and points[0].has_appointment:
        pinned: list[Point] = []
    else:
        pinned = [resolve_start(points, start)]
    pinned_ids = {point.id for point in pinned}

    with_time = sorted(
        (point for point in points if point.has_appointment and point.id not in pinned_ids),
        key=Point.appointment_sort_key,
    )
    without_time = [point for point in points if not point.has_appointment and point.id not in pinned_ids]
    return extend_nearest_neighbor([*pinned, *with_time], without_time)


def windowed_route(points: Sequence[Point], start: Point | None = None) -> RouteResult:
    if not points:
        return RouteResult.empty()
    return summarize_route(windowed_order(points, start), strategy="time_windows")
