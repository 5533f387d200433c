"""Routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

StrategyName = Literal["external", "two_opt", "nearest_neighbor", "identity"]


class PointModel(BaseModel):
    id: str = Field(..., min_length=1)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = Field(default=None, description="Free-form address; geocoded when coordinates are missing.")
    service_duration_minutes: float = Field(default=0.0, ge=0)
    fixed_arrival_time: Optional[datetime] = Field(
        default=None,
        description="Appointment time (ISO 8601). Any appointment switches the route to chronological ordering.",
    )
    arrival_window_minutes: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _require_location(self) -> "PointModel":
        if (self.lat is None) != (self.lng is None):
            raise ValueError(f"Point '{self.id}' must provide both lat and lng, or neither.")
        if self.lat is None and not (self.address and self.address.strip()):
            raise ValueError(f"Point '{self.id}' needs coordinates or an address.")
        return self


class CostParametersModel(BaseModel):
    fuel_price_per_liter: Optional[float] = Field(None, ge=0)
    fuel_consumption_l_per_100km: Optional[float] = Field(None, ge=0)
    hourly_rate: Optional[float] = Field(None, ge=0)
    maintenance_cost_per_km: Optional[float] = Field(None, ge=0)


class OptimizeRequest(BaseModel):
    points: List[PointModel]
    start: Optional[PointModel] = Field(
        default=None,
        description="Preferred first stop. A point outside the list only selects the nearest point to begin with.",
    )
    strategies: Optional[List[StrategyName]] = Field(
        default=None,
        description="Override of the fallback chain, tried in order.",
    )
    cost_parameters: Optional[CostParametersModel] = None
    persist: bool = False
    run_label: Optional[str] = Field(default=None, description="Friendly name for persisted outputs.")


class MultiDriverRequest(BaseModel):
    points: List[PointModel]
    driver_count: int = Field(..., ge=1)
    start_points: Optional[List[Optional[PointModel]]] = None
    driver_ids: Optional[List[str]] = None
    seed: Optional[int] = Field(default=None, description="Seed for reproducible clustering.")
    cost_parameters: Optional[CostParametersModel] = None
    persist: bool = False
    run_label: Optional[str] = None


class RouteLegModel(BaseModel):
    from_id: str
    to_id: str
    distance_km: float
    duration_minutes: float
    duration_in_traffic_minutes: Optional[float] = None


class CostBreakdownModel(BaseModel):
    fuel: float
    time: float
    maintenance: float
    total: float


class RouteResultModel(BaseModel):
    ordered_ids: List[str]
    total_distance_km: float
    total_duration_minutes: float
    legs: List[RouteLegModel]
    strategy: str
    degraded: bool = False
    fallbacks: List[str] = Field(default_factory=list)
    cost: Optional[CostBreakdownModel] = None


class OptimizeResponse(BaseModel):
    route: RouteResultModel
    metadata: dict


class DriverRouteModel(BaseModel):
    driver_index: int
    driver_id: str
    rebalanced: bool = False
    route: RouteResultModel


class MultiDriverResponse(BaseModel):
    drivers: List[DriverRouteModel]
    total_distance_km: float
    total_duration_minutes: float
    metadata: dict


class ExportRoute(BaseModel):
    name: str
    ordered_ids: List[str]


class ExportRequest(BaseModel):
    points: List[PointModel]
    routes: List[ExportRoute] = Field(..., min_length=1)


class GeocodeRequest(BaseModel):
    address: str = Field(..., min_length=1)


class GeocodeResponse(BaseModel):
    address: str
    lat: float
    lng: float

