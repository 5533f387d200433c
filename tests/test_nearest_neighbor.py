import pytest

from src.routeplanner.models.domain import Point
from src.routeplanner.services.geospatial import haversine_km
from src.routeplanner.services.routing.nearest_neighbor import nearest_neighbor_order, nearest_neighbor_route

UNIT_KM = haversine_km(0.0, 0.0, 0.0, 1.0)


def _point(pid: str, lng: float, lat: float = 0.0, service: float = 0.0) -> Point:
    return Point(id=pid, lat=lat, lng=lng, service_duration_minutes=service)


def test_empty_input_yields_empty_route():
    result = nearest_neighbor_route([])

    assert result.ordered_ids == ()
    assert result.total_distance_km == 0.0
    assert result.total_duration_minutes == 0.0
    assert result.legs == ()


def test_single_point_has_zero_totals():
    result = nearest_neighbor_route([_point("only", 3.0, service=15.0)])

    assert result.ordered_ids == ("only",)
    assert result.total_distance_km == 0.0
    assert result.total_duration_minutes == 0.0
    assert result.legs == ()


def test_equidistant_candidates_resolve_to_earliest_input():
    points = [_point("s", 0.0), _point("east", 1.0), _point("west", -1.0)]

    order = nearest_neighbor_order(points)

    assert [point.id for point in order] == ["s", "east", "west"]


def test_start_in_set_is_visited_first():
    # Points on a line at 0,1,2,3 given in the order 2,0,3,1.
    points = [_point("x2", 2.0), _point("x0", 0.0), _point("x3", 3.0), _point("x1", 1.0)]

    result = nearest_neighbor_route(points, start=points[0])

    assert result.ordered_ids == ("x2", "x3", "x1", "x0")
    assert result.total_distance_km == pytest.approx(4 * UNIT_KM)
    assert result.strategy == "nearest_neighbor"


def test_start_outside_set_selects_nearest_point():
    points = [_point("x2", 2.0), _point("x0", 0.0), _point("x3", 3.0), _point("x1", 1.0)]
    depot = _point("depot", 2.9)

    result = nearest_neighbor_route(points, start=depot)

    assert result.ordered_ids == ("x3", "x2", "x1", "x0")
    assert "depot" not in result.ordered_ids
    assert result.total_distance_km == pytest.approx(3 * UNIT_KM)


def test_duration_adds_service_time_after_first_stop():
    points = [_point("a", 0.0, service=30.0), _point("b", 1.0, service=10.0), _point("c", 2.0, service=5.0)]

    result = nearest_neighbor_route(points)

    travel = 2 * UNIT_KM / 50.0 * 60.0
    assert result.total_duration_minutes == pytest.approx(travel + 15.0)
    assert [leg.duration_minutes for leg in result.legs] == pytest.approx([travel / 2, travel / 2])
    assert [(leg.from_id, leg.to_id) for leg in result.legs] == [("a", "b"), ("b", "c")]
