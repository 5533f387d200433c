import logging

import numpy as np
import pytest

from src.routeplanner.models.domain import Point
from src.routeplanner.services.routing.exceptions import ExternalServiceError, InvalidInputError, OptimizationFailed
from src.routeplanner.services.routing.external import ExternalRoutingAdapter
from src.routeplanner.services.routing.models import RouteResult
from src.routeplanner.services.routing.optimizer import RouteOptimizer, optimize
from src.routeplanner.services.routing.strategies import (
    IdentityStrategy,
    NearestNeighborStrategy,
    RoutingStrategy,
    TwoOptStrategy,
    get_strategy,
)


def _point(pid: str, lng: float, lat: float = 0.0, service: float = 0.0) -> Point:
    return Point(id=pid, lat=lat, lng=lng, service_duration_minutes=service)


class FailingStrategy(RoutingStrategy):
    name = "failing"

    def attempt(self, points, start=None):
        raise OptimizationFailed("service down")


class DroppingStrategy(RoutingStrategy):
    """Returns a route missing its last stop."""

    name = "dropping"

    def attempt(self, points, start=None):
        return RouteResult(
            ordered_ids=tuple(point.id for point in points[:-1]),
            total_distance_km=0.0,
            total_duration_minutes=0.0,
            legs=(),
            strategy=self.name,
        )


class UnavailableDirections:
    def trip(self, coordinates):
        raise ExternalServiceError("connection refused")


class IdentityDirections:
    def trip(self, coordinates):
        return {
            "code": "Ok",
            "waypoints": [{"waypoint_index": index} for index in range(len(coordinates))],
            "trips": [{"legs": [{"distance": 1000.0, "duration": 60.0}] * (len(coordinates) - 1)}],
        }


@pytest.fixture
def points() -> list[Point]:
    return [_point("a", 0.0), _point("c", 2.0), _point("b", 1.0), _point("d", 3.0)]


def test_empty_and_single_point_routes():
    empty = optimize([], optimizer=RouteOptimizer([FailingStrategy()]))
    assert empty.ordered_ids == ()
    assert empty.total_distance_km == 0.0

    single = optimize([_point("solo", 1.0, service=20.0)], optimizer=RouteOptimizer([FailingStrategy()]))
    assert single.ordered_ids == ("solo",)
    assert single.total_duration_minutes == 0.0
    assert single.strategy == "trivial"
    assert not single.degraded


def test_first_successful_strategy_is_not_degraded(points):
    optimizer = RouteOptimizer(adapter=ExternalRoutingAdapter(IdentityDirections()))

    result = optimizer.optimize(points)

    assert result.strategy == "external"
    assert result.ordered_ids == ("a", "c", "b", "d")
    assert result.total_distance_km == pytest.approx(3.0)
    assert not result.degraded


def test_unavailable_service_falls_back_to_two_opt(points, caplog):
    hook_calls: list[RouteResult] = []
    optimizer = RouteOptimizer(
        adapter=ExternalRoutingAdapter(UnavailableDirections()),
        on_degraded=hook_calls.append,
    )

    with caplog.at_level(logging.WARNING):
        result = optimizer.optimize(points)

    assert result.strategy == "two_opt"
    assert result.degraded
    assert result.fallbacks == ("external: connection refused",)
    assert result.ordered_ids == ("a", "b", "c", "d")
    assert hook_calls == [result]
    assert "external" in caplog.text


def test_incomplete_route_is_rejected(points):
    result = RouteOptimizer([DroppingStrategy(), NearestNeighborStrategy()]).optimize(points)

    assert result.strategy == "nearest_neighbor"
    assert result.fallbacks[0].startswith("dropping:")
    assert sorted(result.ordered_ids) == ["a", "b", "c", "d"]


def test_every_strategy_failing_keeps_input_order(points):
    result = RouteOptimizer([FailingStrategy(), DroppingStrategy()]).optimize(points)

    assert result.strategy == "identity"
    assert result.ordered_ids == ("a", "c", "b", "d")
    assert len(result.fallbacks) == 2
    assert len(result.legs) == 3


def test_hook_errors_do_not_escape(points):
    def broken_hook(result):
        raise RuntimeError("telemetry offline")

    result = RouteOptimizer([FailingStrategy(), IdentityStrategy()], on_degraded=broken_hook).optimize(points)

    assert result.strategy == "identity"
    assert result.degraded


def test_duplicate_ids_raise_without_fallback():
    duplicated = [_point("a", 0.0), _point("a", 1.0), _point("b", 2.0)]

    with pytest.raises(InvalidInputError, match="a"):
        RouteOptimizer([IdentityStrategy()]).optimize(duplicated)
    with pytest.raises(ValueError):
        optimize(duplicated)


def test_start_hint_outside_set(points):
    depot = _point("depot", 2.9)

    result = RouteOptimizer([TwoOptStrategy()]).optimize(points, depot)

    assert result.ordered_ids[0] == "d"
    assert "depot" not in result.ordered_ids


def test_strategies_can_be_selected_by_name(points):
    optimizer = RouteOptimizer.from_names(["nearest_neighbor", "identity"])

    assert [strategy.name for strategy in optimizer.strategies] == ["nearest_neighbor", "identity"]
    assert optimizer.optimize(points).strategy == "nearest_neighbor"

    with pytest.raises(ValueError):
        get_strategy("simulated_annealing")


def test_result_is_always_a_permutation():
    rng = np.random.default_rng(5)
    coordinates = rng.uniform([24.5, 46.5], [24.9, 46.9], size=(30, 2))
    scattered = [Point(id=f"p{i}", lat=float(lat), lng=float(lng)) for i, (lat, lng) in enumerate(coordinates)]
    optimizer = RouteOptimizer(adapter=ExternalRoutingAdapter(UnavailableDirections()))

    result = optimizer.optimize(scattered, scattered[7])

    assert sorted(result.ordered_ids) == sorted(point.id for point in scattered)
    assert result.ordered_ids[0] == "p7"
    assert len(result.legs) == len(scattered) - 1
    assert result.total_distance_km == pytest.approx(sum(leg.distance_km for leg in result.legs))


def test_fallback_path_is_deterministic(points):
    optimizer = RouteOptimizer(adapter=ExternalRoutingAdapter(UnavailableDirections()))

    first = optimizer.optimize(points)
    second = optimizer.optimize(points)

    assert first.ordered_ids == second.ordered_ids
    assert first.total_distance_km == second.total_distance_km
