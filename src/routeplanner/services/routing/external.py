"""Adapter that delegates waypoint ordering to an external directions service."""

from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence

from ...config import settings
from ...models.domain import Point
from .accounting import service_minutes_after_first, summarize_route
from .exceptions import ExternalServiceError
from .models import RouteLeg, RouteResult

logger = logging.getLogger(__name__)


class DirectionsClient(Protocol):
    def trip(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        ...


def _default_client() -> DirectionsClient:
    from .osrm_client import OSRMClient

    return OSRMClient()


class ExternalRoutingAdapter:
    """Keeps the first and last point fixed and lets the service reorder the rest.

    The client is created lazily so that an unconfigured service only fails
    when the adapter is actually used.
    """

    def __init__(
        self,
        client: DirectionsClient | None = None,
        *,
        client_factory: Callable[[], DirectionsClient] | None = None,
        max_waypoints: int | None = None,
    ) -> None:
        self._client = client
        self._client_factory = client_factory or _default_client
        self.max_waypoints = max_waypoints if max_waypoints is not None else settings.directions_max_waypoints

    @property
    def client(self) -> DirectionsClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def optimize(self, points: Sequence[Point]) -> RouteResult:
        if len(points) < 2:
            return summarize_route(points, strategy="external")

        waypoint_count = len(points) - 2
        if waypoint_count > self.max_waypoints:
            raise ExternalServiceError(
                f"{waypoint_count} waypoints exceed the directions service limit of {self.max_waypoints}."
            )

        payload = self.client.trip([(point.lat, point.lng) for point in points])
        order = _visit_order(payload, len(points))
        ordered = [points[index] for index in order]
        legs = _legs(payload, ordered)

        total_distance = sum(leg.distance_km for leg in legs)
        total_travel = sum(leg.duration_minutes for leg in legs)
        logger.info(
            "Directions service ordered %d stops: %.2f km, %.1f min travel",
            len(ordered),
            total_distance,
            total_travel,
        )
        return RouteResult(
            ordered_ids=tuple(point.id for point in ordered),
            total_distance_km=total_distance,
            total_duration_minutes=total_travel + service_minutes_after_first(ordered),
            legs=tuple(legs),
            strategy="external",
        )


def _visit_order(payload: dict, count: int) -> list[int]:
    """Input indices in visiting order, from each waypoint's position in the trip."""
    try:
        waypoints = payload["waypoints"]
        positions = [int(waypoint["waypoint_index"]) for waypoint in waypoints]
    except (KeyError, TypeError, ValueError) as exc:
        raise ExternalServiceError("Directions response is missing waypoint positions.") from exc

    if len(positions) != count or sorted(positions) != list(range(count)):
        raise ExternalServiceError("Directions response does not describe a permutation of the stops.")

    order = sorted(range(count), key=lambda index: positions[index])
    if order[0] != 0 or order[-1] != count - 1:
        raise ExternalServiceError("Directions service moved the origin or destination.")
    return order


def _legs(payload: dict, ordered: Sequence[Point]) -> list[RouteLeg]:
    try:
        raw_legs = payload["trips"][0]["legs"]
        if len(raw_legs) != len(ordered) - 1:
            raise ValueError(f"expected {len(ordered) - 1} legs, got {len(raw_legs)}")
        legs = []
        for origin, destination, raw in zip(ordered, ordered[1:], raw_legs):
            distance_km = float(raw["distance"]) / 1000.0
            duration_minutes = float(raw["duration"]) / 60.0
            if distance_km < 0 or duration_minutes < 0:
                raise ValueError("negative leg distance or duration")
            traffic = raw.get("duration_in_traffic")
            legs.append(
                RouteLeg(
                    from_id=origin.id,
                    to_id=destination.id,
                    distance_km=distance_km,
                    duration_minutes=duration_minutes,
                    duration_in_traffic_minutes=float(traffic) / 60.0 if traffic is not None else None,
                )
            )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
        raise ExternalServiceError(f"Directions response has malformed legs: {exc}") from exc
    return legs
