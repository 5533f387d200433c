"""Single-driver route optimization with a strategy fallback chain.

Routes containing appointments are ordered chronologically and skip the
chain entirely. Otherwise each strategy is tried in turn (directions service,
2-opt, nearest neighbour, input order) and the first complete route wins.
Failures are logged and recorded on the result, never raised.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Iterable, Sequence

from ...models.domain import Point, duplicate_ids
from .accounting import summarize_route
from .exceptions import InvalidInputError, OptimizationFailed
from .external import ExternalRoutingAdapter
from .models import RouteResult
from .strategies import (
    IdentityStrategy,
    RoutingStrategy,
    TimeWindowStrategy,
    default_fallback_chain,
    get_strategy,
)
from .time_windows import has_appointments

logger = logging.getLogger(__name__)

DegradedHook = Callable[[RouteResult], None]


def validate_points(points: Sequence[Point]) -> None:
    duplicates = duplicate_ids(points)
    if duplicates:
        raise InvalidInputError(f"Point ids must be unique; duplicated: {', '.join(duplicates)}")


def _check_permutation(result: RouteResult, points: Sequence[Point]) -> None:
    if Counter(result.ordered_ids) != Counter(point.id for point in points):
        raise OptimizationFailed("route is not a permutation of the input points")
    if len(result.legs) != max(len(result.ordered_ids) - 1, 0):
        raise OptimizationFailed("leg count does not match the number of stops")


class RouteOptimizer:
    """Runs the fallback chain for one driver's points."""

    def __init__(
        self,
        strategies: Iterable[RoutingStrategy] | None = None,
        *,
        adapter: ExternalRoutingAdapter | None = None,
        on_degraded: DegradedHook | None = None,
    ) -> None:
        self.strategies = list(strategies) if strategies is not None else default_fallback_chain(adapter)
        self.time_window_strategy = TimeWindowStrategy()
        self.on_degraded = on_degraded

    @classmethod
    def from_names(cls, names: Sequence[str], **kwargs) -> "RouteOptimizer":
        adapter = kwargs.pop("adapter", None)
        return cls([get_strategy(name, adapter=adapter) for name in names], **kwargs)

    def optimize(self, points: Sequence[Point], start: Point | None = None) -> RouteResult:
        validate_points(points)
        if len(points) < 2:
            return summarize_route(points, strategy="trivial")

        if has_appointments(points):
            logger.info("Appointments present; ordering %d stops chronologically", len(points))
            return self.time_window_strategy.attempt(points, start)

        fallbacks: list[str] = []
        for strategy in self.strategies:
            try:
                result = strategy.attempt(points, start)
                _check_permutation(result, points)
            except Exception as exc:
                logger.warning("Routing strategy '%s' failed: %s", strategy.name, exc)
                fallbacks.append(f"{strategy.name}: {exc}")
                continue
            return self._finish(result, fallbacks)

        logger.error("Every routing strategy failed for %d stops; keeping input order", len(points))
        return self._finish(IdentityStrategy().attempt(points), fallbacks)

    def _finish(self, result: RouteResult, fallbacks: list[str]) -> RouteResult:
        if not fallbacks:
            logger.info(
                "Route optimized with '%s': %d stops, %.2f km",
                result.strategy,
                result.stop_count,
                result.total_distance_km,
            )
            return result

        degraded = result.with_fallbacks(tuple(fallbacks))
        logger.warning(
            "Route optimization degraded to '%s' after %d failed strateg%s",
            degraded.strategy,
            len(fallbacks),
            "y" if len(fallbacks) == 1 else "ies",
        )
        if self.on_degraded is not None:
            try:
                self.on_degraded(degraded)
            except Exception:
                logger.exception("Degraded-route hook raised")
        return degraded


def optimize(
    points: Sequence[Point],
    start: Point | None = None,
    *,
    optimizer: RouteOptimizer | None = None,
) -> RouteResult:
    """Order one driver's points; always returns a complete route."""
    return (optimizer or RouteOptimizer()).optimize(points, start)
