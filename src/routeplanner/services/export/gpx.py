"""GPX export of planned routes for GPS devices and navigation apps."""

from __future__ import annotations

from typing import Mapping, Sequence

import gpxpy.gpx

from ...models.domain import Point
from ..routing.models import RouteResult

GPX_CREATOR = "Route Planner"


def routes_to_gpx(
    routes: Sequence[tuple[str, RouteResult]],
    points_by_id: Mapping[str, Point],
) -> str:
    """Render named routes as a GPX 1.1 document with one ``<rte>`` per route.

    Args:
        routes: (name, result) pairs; empty routes are skipped.
        points_by_id: lookup for the coordinates of every routed id.

    Returns:
        The GPX XML text.
    """
    gpx = gpxpy.gpx.GPX()
    gpx.creator = GPX_CREATOR

    for name, result in routes:
        if not result.ordered_ids:
            continue
        route = gpxpy.gpx.GPXRoute(name=name)
        for sequence, point_id in enumerate(result.ordered_ids, start=1):
            point = points_by_id[point_id]
            route.points.append(
                gpxpy.gpx.GPXRoutePoint(
                    latitude=point.lat,
                    longitude=point.lng,
                    name=point.label,
                    comment=f"Stop {sequence}",
                )
            )
        gpx.routes.append(route)

    return gpx.to_xml(version="1.1")
