"""Routing orchestration service used by the HTTP API."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Sequence

import numpy as np

from ...models.domain import Point
from ...persistence.filesystem import FileStorage
from ...schemas.routing import (
    CostBreakdownModel,
    CostParametersModel,
    DriverRouteModel,
    ExportRequest,
    MultiDriverRequest,
    MultiDriverResponse,
    OptimizeRequest,
    OptimizeResponse,
    PointModel,
    RouteLegModel,
    RouteResultModel,
)
from ..costs import CostParameters, estimate_route_cost
from ..export.geojson import routes_to_feature_collection, save_geojson
from ..export.gpx import routes_to_gpx
from ..geocoding import geocode_address
from ..outputs.routing_formatter import driver_routes_to_json, route_result_to_json, routes_to_csv
from .accounting import summarize_route
from .models import DriverRoute, RouteResult
from .optimizer import RouteOptimizer, validate_points
from .partitioner import partition_and_optimize

logger = logging.getLogger(__name__)


def to_point(model: PointModel) -> Point:
    """Convert a request point, geocoding its address when coordinates are missing."""
    if model.lat is None or model.lng is None:
        lat, lng = geocode_address(model.address or "")
    else:
        lat, lng = model.lat, model.lng
    return Point(
        id=model.id,
        lat=lat,
        lng=lng,
        service_duration_minutes=model.service_duration_minutes,
        fixed_arrival_time=model.fixed_arrival_time,
        arrival_window_minutes=model.arrival_window_minutes,
        address=model.address,
    )


def _cost_parameters(model: CostParametersModel | None) -> CostParameters:
    base = CostParameters()
    if model is None:
        return base
    overrides = {key: value for key, value in model.model_dump().items() if value is not None}
    return CostParameters(**{**asdict(base), **overrides})


def _route_model(result: RouteResult, parameters: CostParameters) -> RouteResultModel:
    cost = estimate_route_cost(result.total_distance_km, result.total_duration_minutes, parameters)
    return RouteResultModel(
        ordered_ids=list(result.ordered_ids),
        total_distance_km=result.total_distance_km,
        total_duration_minutes=result.total_duration_minutes,
        legs=[RouteLegModel(**asdict(leg)) for leg in result.legs],
        strategy=result.strategy,
        degraded=result.degraded,
        fallbacks=list(result.fallbacks),
        cost=CostBreakdownModel(
            fuel=cost.fuel,
            time=cost.time,
            maintenance=cost.maintenance,
            total=cost.total,
        ),
    )


def _persist_run(
    prefix: str,
    label: str | None,
    summary: dict,
    named_routes: Sequence[tuple[str, RouteResult]],
    points: Sequence[Point],
) -> str:
    points_by_id = {point.id: point for point in points}
    storage = FileStorage()
    run_dir = storage.make_run_directory(prefix=prefix, label=label)
    storage.write_json(run_dir / "summary.json", summary)
    storage.write_text(run_dir / "stops.csv", routes_to_csv(named_routes, points_by_id))
    try:
        storage.write_text(run_dir / "route.gpx", routes_to_gpx(named_routes, points_by_id))
        save_geojson(routes_to_feature_collection(named_routes, points_by_id), run_dir / "routes.geojson")
    except Exception as exc:
        logger.warning(f"Failed to write GPS exports for run {run_dir.name}: {exc}")
    return str(run_dir)


def optimize_route(payload: OptimizeRequest, *, optimizer: RouteOptimizer | None = None) -> OptimizeResponse:
    points = [to_point(model) for model in payload.points]
    start = to_point(payload.start) if payload.start else None

    if optimizer is None:
        optimizer = RouteOptimizer.from_names(payload.strategies) if payload.strategies else RouteOptimizer()
    result = optimizer.optimize(points, start)

    metadata: dict = {"stop_count": result.stop_count, "strategy": result.strategy}
    if payload.run_label:
        metadata["run_label"] = payload.run_label
    if payload.persist:
        metadata["output_dir"] = _persist_run(
            prefix="route",
            label=payload.run_label,
            summary={"metadata": metadata, "route": route_result_to_json(result)},
            named_routes=[(payload.run_label or "route", result)],
            points=points,
        )

    return OptimizeResponse(route=_route_model(result, _cost_parameters(payload.cost_parameters)), metadata=metadata)


def optimize_drivers(
    payload: MultiDriverRequest,
    *,
    optimizer: RouteOptimizer | None = None,
) -> MultiDriverResponse:
    points = [to_point(model) for model in payload.points]
    start_points = [to_point(model) if model else None for model in payload.start_points or []]
    rng = np.random.default_rng(payload.seed) if payload.seed is not None else None

    driver_routes: list[DriverRoute] = partition_and_optimize(
        points,
        payload.driver_count,
        start_points,
        optimizer=optimizer,
        rng=rng,
        driver_ids=payload.driver_ids,
    )

    parameters = _cost_parameters(payload.cost_parameters)
    metadata: dict = {
        "driver_count": payload.driver_count,
        "stop_count": len(points),
        "rebalanced_drivers": [route.driver_id for route in driver_routes if route.rebalanced],
        "degraded_drivers": [route.driver_id for route in driver_routes if route.route.degraded],
    }
    if payload.run_label:
        metadata["run_label"] = payload.run_label
    if payload.persist:
        metadata["output_dir"] = _persist_run(
            prefix="drivers",
            label=payload.run_label,
            summary={"metadata": metadata, **driver_routes_to_json(driver_routes)},
            named_routes=[(route.driver_id, route.route) for route in driver_routes],
            points=points,
        )

    return MultiDriverResponse(
        drivers=[
            DriverRouteModel(
                driver_index=route.driver_index,
                driver_id=route.driver_id,
                rebalanced=route.rebalanced,
                route=_route_model(route.route, parameters),
            )
            for route in driver_routes
        ],
        total_distance_km=sum(route.route.total_distance_km for route in driver_routes),
        total_duration_minutes=sum(route.route.total_duration_minutes for route in driver_routes),
        metadata=metadata,
    )


def _export_inputs(payload: ExportRequest) -> tuple[list[tuple[str, RouteResult]], dict[str, Point]]:
    points = [to_point(model) for model in payload.points]
    validate_points(points)
    points_by_id = {point.id: point for point in points}

    named_routes: list[tuple[str, RouteResult]] = []
    for route in payload.routes:
        unknown = [pid for pid in route.ordered_ids if pid not in points_by_id]
        if unknown:
            raise ValueError(f"Route '{route.name}' references unknown point ids: {', '.join(unknown)}")
        ordered = [points_by_id[pid] for pid in route.ordered_ids]
        named_routes.append((route.name, summarize_route(ordered, strategy="identity")))
    return named_routes, points_by_id


def export_gpx(payload: ExportRequest) -> str:
    named_routes, points_by_id = _export_inputs(payload)
    return routes_to_gpx(named_routes, points_by_id)


def export_geojson(payload: ExportRequest) -> dict:
    named_routes, points_by_id = _export_inputs(payload)
    return routes_to_feature_collection(named_routes, points_by_id)
