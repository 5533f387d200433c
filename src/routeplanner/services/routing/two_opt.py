"""2-opt local search seeded with the nearest-neighbour route."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...models.domain import Point
from .accounting import route_distance_km, summarize_route
from .models import RouteResult
from .nearest_neighbor import nearest_neighbor_order

logger = logging.getLogger(__name__)

# Ignore "improvements" that are only floating point noise.
_IMPROVEMENT_EPSILON_KM = 1e-9


def improve_order(route: Sequence[Point], max_iterations: int | None = None) -> list[Point]:
    """Reverse segments of ``route`` while doing so shortens it.

    First-improvement: the first shorter candidate is adopted and the scan
    restarts. The first and last stops never move.
    """
    max_iterations = max_iterations or settings.two_opt_max_iterations
    best_route = list(route)
    best_distance = route_distance_km(best_route)
    n = len(best_route)

    iterations = 0
    improved = True
    while improved and iterations < max_iterations:
        improved = False
        iterations += 1
        for i in range(1, n - 2):
            for j in range(i + 1, n - 1):
                candidate = best_route[:i] + best_route[i : j + 1][::-1] + best_route[j + 1 :]
                candidate_distance = route_distance_km(candidate)
                if candidate_distance < best_distance - _IMPROVEMENT_EPSILON_KM:
                    best_route = candidate
                    best_distance = candidate_distance
                    improved = True
                    break
            if improved:
                break

    logger.debug("2-opt finished after %d iteration(s), distance %.3f km", iterations, best_distance)
    return best_route


def two_opt_improve(
    initial_route: Sequence[Point],
    start: Point | None = None,
    *,
    max_iterations: int | None = None,
) -> RouteResult:
    if not initial_route:
        return RouteResult.empty()
    seed = nearest_neighbor_order(initial_route, start)
    return summarize_route(improve_order(seed, max_iterations), strategy="two_opt")
