import numpy as np
import pytest

from src.routeplanner.models.domain import Point
from src.routeplanner.services.geospatial import haversine_km
from src.routeplanner.services.routing.accounting import route_distance_km
from src.routeplanner.services.routing.nearest_neighbor import nearest_neighbor_route
from src.routeplanner.services.routing.two_opt import improve_order, two_opt_improve

UNIT_KM = haversine_km(0.0, 0.0, 0.0, 1.0)


def _point(pid: str, lng: float, lat: float = 0.0) -> Point:
    return Point(id=pid, lat=lat, lng=lng)


def _line(*positions: int) -> list[Point]:
    return [_point(f"x{pos}", float(pos)) for pos in positions]


def test_improve_order_untangles_line_with_fixed_endpoints():
    route = _line(0, 3, 1, 2, 4)

    improved = improve_order(route)

    assert [point.id for point in improved] == ["x0", "x1", "x2", "x3", "x4"]
    assert route_distance_km(improved) == pytest.approx(4 * UNIT_KM)


def test_improve_order_respects_iteration_cap():
    improved = improve_order(_line(0, 3, 1, 2, 4), max_iterations=1)

    # One accepted reversal only.
    assert [point.id for point in improved] == ["x0", "x1", "x3", "x2", "x4"]


def test_improve_order_never_moves_endpoints():
    route = _line(2, 0, 4, 1, 3)

    improved = improve_order(route)

    assert improved[0].id == "x2"
    assert improved[-1].id == "x3"


def test_two_opt_from_interior_start_keeps_reachable_optimum():
    points = _line(2, 0, 3, 1)

    result = two_opt_improve(points, start=points[0])

    assert result.ordered_ids[0] == "x2"
    assert result.total_distance_km == pytest.approx(4 * UNIT_KM)
    assert result.strategy == "two_opt"


def test_two_opt_never_longer_than_nearest_neighbor():
    rng = np.random.default_rng(11)
    points = [
        Point(id=f"p{i}", lat=float(lat), lng=float(lng))
        for i, (lat, lng) in enumerate(rng.uniform([21.3, 39.0], [21.8, 39.4], size=(25, 2)))
    ]

    improved = two_opt_improve(points)
    greedy = nearest_neighbor_route(points)

    assert improved.total_distance_km <= greedy.total_distance_km + 1e-9
    assert sorted(improved.ordered_ids) == sorted(point.id for point in points)
    assert improved.ordered_ids[0] == "p0"


def test_two_opt_trivial_inputs():
    assert two_opt_improve([]).ordered_ids == ()
    single = two_opt_improve([_point("a", 0.0)])
    assert single.ordered_ids == ("a",)
    assert single.total_duration_minutes == 0.0


def test_triangle_route_stays_within_perimeter():
    # Roughly 10 km apart around Riyadh.
    points = [
        Point(id="a", lat=24.7000, lng=46.6000),
        Point(id="b", lat=24.7000, lng=46.6990),
        Point(id="c", lat=24.7780, lng=46.6495),
    ]
    perimeter = sum(
        haversine_km(p.lat, p.lng, q.lat, q.lng) for p, q in zip(points, points[1:] + points[:1])
    )

    greedy = nearest_neighbor_route(points)
    improved = two_opt_improve(points)

    assert improved.ordered_ids == greedy.ordered_ids
    assert improved.total_distance_km == pytest.approx(greedy.total_distance_km)
    assert improved.total_distance_km < perimeter
