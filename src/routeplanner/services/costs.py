"""Operating cost estimate for a planned route."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import settings


@dataclass(frozen=True, slots=True)
class CostParameters:
    fuel_price_per_liter: float = settings.fuel_price_per_liter
    fuel_consumption_l_per_100km: float = settings.fuel_consumption_l_per_100km
    hourly_rate: float = settings.hourly_rate
    maintenance_cost_per_km: float = settings.maintenance_cost_per_km


@dataclass(frozen=True, slots=True)
class CostBreakdown:
    fuel: float
    time: float
    maintenance: float

    @property
    def total(self) -> float:
        return self.fuel + self.time + self.maintenance


def estimate_route_cost(
    distance_km: float,
    duration_minutes: float,
    parameters: CostParameters | None = None,
) -> CostBreakdown:
    params = parameters or CostParameters()
    if distance_km < 0 or duration_minutes < 0:
        raise ValueError("distance and duration must be >= 0")
    return CostBreakdown(
        fuel=distance_km * (params.fuel_consumption_l_per_100km / 100.0) * params.fuel_price_per_liter,
        time=(duration_minutes / 60.0) * params.hourly_rate,
        maintenance=distance_km * params.maintenance_cost_per_km,
    )
