"""Route ordering strategies used by the optimizer's fallback chain."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...models.domain import Point
from .accounting import move_to_front, resolve_start, summarize_route
from .external import ExternalRoutingAdapter
from .models import RouteResult
from .nearest_neighbor import nearest_neighbor_route
from .time_windows import windowed_route
from .two_opt import two_opt_improve


class RoutingStrategy(ABC):
    """Contract for a single way of ordering a route.

    ``attempt`` either returns a complete result or raises; it never returns a
    partial route.
    """

    name: str = "strategy"

    @abstractmethod
    def attempt(self, points: Sequence[Point], start: Point | None = None) -> RouteResult:
        raise NotImplementedError


class ExternalServiceStrategy(RoutingStrategy):
    name = "external"

    def __init__(self, adapter: ExternalRoutingAdapter | None = None) -> None:
        self.adapter = adapter or ExternalRoutingAdapter()

    def attempt(self, points: Sequence[Point], start: Point | None = None) -> RouteResult:
        first = resolve_start(points, start)
        ordered = move_to_front(points, first) if first is not None else list(points)
        return self.adapter.optimize(ordered)


class TwoOptStrategy(RoutingStrategy):
    name = "two_opt"

    def __init__(self, max_iterations: int | None = None) -> None:
        self.max_iterations = max_iterations

    def attempt(self, points: Sequence[Point], start: Point | None = None) -> RouteResult:
        return two_opt_improve(points, start, max_iterations=self.max_iterations)


class NearestNeighborStrategy(RoutingStrategy):
    name = "nearest_neighbor"

    def attempt(self, points: Sequence[Point], start: Point | None = None) -> RouteResult:
        return nearest_neighbor_route(points, start)


class IdentityStrategy(RoutingStrategy):
    """Keeps the input order; only measures it."""

    name = "identity"

    def attempt(self, points: Sequence[Point], start: Point | None = None) -> RouteResult:
        return summarize_route(points, strategy=self.name)


class TimeWindowStrategy(RoutingStrategy):
    name = "time_windows"

    def attempt(self, points: Sequence[Point], start: Point | None = None) -> RouteResult:
        return windowed_route(points, start)


def default_fallback_chain(adapter: ExternalRoutingAdapter | None = None) -> list[RoutingStrategy]:
    return [
        ExternalServiceStrategy(adapter),
        TwoOptStrategy(),
        NearestNeighborStrategy(),
        IdentityStrategy(),
    ]


def get_strategy(name: str, **kwargs) -> RoutingStrategy:
    match name:
        case "external":
            return ExternalServiceStrategy(kwargs.get("adapter"))
        case "two_opt":
            return TwoOptStrategy(kwargs.get("max_iterations"))
        case "nearest_neighbor":
            return NearestNeighborStrategy()
        case "identity":
            return IdentityStrategy()
        case "time_windows":
            return TimeWindowStrategy()
        case _:
            raise ValueError(f"Unknown routing strategy '{name}'.")
