import pytest

from src.routeplanner.services.costs import CostParameters, estimate_route_cost


def test_default_cost_breakdown():
    cost = estimate_route_cost(100.0, 120.0)

    assert cost.fuel == pytest.approx(14.4)
    assert cost.time == pytest.approx(60.0)
    assert cost.maintenance == pytest.approx(5.0)
    assert cost.total == pytest.approx(79.4)


def test_custom_parameters():
    parameters = CostParameters(
        fuel_price_per_liter=2.0,
        fuel_consumption_l_per_100km=10.0,
        hourly_rate=0.0,
        maintenance_cost_per_km=0.1,
    )

    cost = estimate_route_cost(50.0, 45.0, parameters)

    assert cost.fuel == pytest.approx(10.0)
    assert cost.time == 0.0
    assert cost.maintenance == pytest.approx(5.0)


def test_zero_route_costs_nothing():
    assert estimate_route_cost(0.0, 0.0).total == 0.0


def test_negative_inputs_rejected():
    with pytest.raises(ValueError):
        estimate_route_cost(-1.0, 10.0)
