from datetime import datetime, timedelta

import numpy as np
import pytest

from src.routeplanner.models.domain import Point
from src.routeplanner.services.routing.exceptions import ExternalServiceError
from src.routeplanner.services.routing.external import ExternalRoutingAdapter
from src.routeplanner.services.routing.models import RouteResult
from src.routeplanner.services.routing.optimizer import RouteOptimizer
from src.routeplanner.services.routing.partitioner import partition_and_optimize


class UnavailableDirections:
    def trip(self, coordinates):
        raise ExternalServiceError("connection refused")


def _random_points(rng: np.random.Generator, count: int, appointment_rate: float = 0.1) -> list[Point]:
    base = datetime(2024, 5, 1, 8, 0)
    points = []
    for index in range(count):
        lat, lng = rng.uniform([21.3, 39.0], [21.8, 39.4])
        at = base + timedelta(minutes=int(rng.integers(0, 600))) if rng.random() < appointment_rate else None
        points.append(
            Point(
                id=f"p{index}",
                lat=float(lat),
                lng=float(lng),
                service_duration_minutes=float(rng.integers(0, 30)),
                fixed_arrival_time=at,
            )
        )
    return points


def _assert_well_formed(result: RouteResult) -> None:
    assert result.total_distance_km >= 0
    assert result.total_duration_minutes >= 0
    assert len(result.legs) == max(len(result.ordered_ids) - 1, 0)
    for leg in result.legs:
        assert leg.distance_km >= 0
        assert leg.duration_minutes >= 0


@pytest.fixture
def optimizer() -> RouteOptimizer:
    return RouteOptimizer(adapter=ExternalRoutingAdapter(UnavailableDirections()))


@pytest.mark.parametrize("count", [0, 1, 2, 5, 12, 29])
def test_single_route_invariants(count, optimizer):
    rng = np.random.default_rng(count)
    points = _random_points(rng, count)

    result = optimizer.optimize(points)

    _assert_well_formed(result)
    assert sorted(result.ordered_ids) == sorted(point.id for point in points)


@pytest.mark.parametrize("driver_count", [1, 2, 3, 4])
@pytest.mark.parametrize("with_starts", [False, True])
@pytest.mark.parametrize("count", [0, 3, 17, 29])
def test_multi_driver_invariants(driver_count, with_starts, count, optimizer):
    rng = np.random.default_rng(100 * driver_count + count)
    points = _random_points(rng, count)
    start_points = _random_points(rng, driver_count, appointment_rate=0.0) if with_starts else None
    if start_points:
        start_points = [Point(id=f"start{i}", lat=p.lat, lng=p.lng) for i, p in enumerate(start_points)]

    routes = partition_and_optimize(
        points,
        driver_count,
        start_points,
        optimizer=optimizer,
        rng=np.random.default_rng(count),
    )

    assert len(routes) == driver_count
    assigned = [pid for route in routes for pid in route.ordered_ids]
    assert sorted(assigned) == sorted(point.id for point in points)
    assert not any(pid.startswith("start") for pid in assigned)
    for route in routes:
        _assert_well_formed(route.route)
