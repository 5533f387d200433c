"""Split points between drivers and optimize each driver's route."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from ...config import settings
from ...models.domain import Point
from ..geospatial import coordinate_centroid, haversine_km
from .accounting import summarize_route
from .exceptions import InvalidInputError
from .models import DriverRoute, RouteResult
from .optimizer import RouteOptimizer, validate_points

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ClusterAssignment:
    clusters: list[list[Point]]
    centers: list[tuple[float, float]]
    iterations: int
    rebalanced: set[int] = field(default_factory=set)

    def sizes(self) -> list[int]:
        return [len(cluster) for cluster in self.clusters]


def _nearest_center(point: Point, centers: Sequence[tuple[float, float]]) -> int:
    nearest_index = 0
    nearest_distance = haversine_km(point.lat, point.lng, centers[0][0], centers[0][1])
    for index in range(1, len(centers)):
        distance = haversine_km(point.lat, point.lng, centers[index][0], centers[index][1])
        if distance < nearest_distance:
            nearest_distance = distance
            nearest_index = index
    return nearest_index


def _rebalance_empty_clusters(clusters: list[list[Point]]) -> set[int]:
    """Give every empty cluster the front half of the currently largest one."""
    rebalanced: set[int] = set()
    for index, cluster in enumerate(clusters):
        if cluster:
            continue
        largest = max(range(len(clusters)), key=lambda i: len(clusters[i]))
        size = len(clusters[largest])
        if size <= 1:
            continue
        moved = size // 2
        clusters[index] = clusters[largest][:moved]
        clusters[largest] = clusters[largest][moved:]
        rebalanced.add(index)
        logger.warning(
            "Cluster %d was empty; moved %d of %d points from cluster %d",
            index,
            moved,
            size,
            largest,
        )
    return rebalanced


def cluster_points(
    points: Sequence[Point],
    cluster_count: int,
    *,
    rng: np.random.Generator | None = None,
    max_iterations: int | None = None,
    tolerance_degrees: float | None = None,
) -> ClusterAssignment:
    """Group points around ``cluster_count`` centroids (k-means with Haversine assignment).

    Centroids are seeded from randomly chosen input points, so repeated calls
    can partition differently unless a seeded generator is passed.
    """
    if cluster_count < 1:
        raise InvalidInputError("cluster_count must be >= 1")
    if len(points) <= cluster_count:
        return ClusterAssignment(
            clusters=[[point] for point in points] + [[] for _ in range(cluster_count - len(points))],
            centers=[(point.lat, point.lng) for point in points],
            iterations=0,
        )

    rng = rng if rng is not None else np.random.default_rng()
    max_iterations = max_iterations or settings.clustering_max_iterations
    tolerance = settings.clustering_tolerance_degrees if tolerance_degrees is None else tolerance_degrees

    seed_indices = rng.choice(len(points), size=cluster_count, replace=False)
    centers = [(points[int(i)].lat, points[int(i)].lng) for i in seed_indices]

    clusters: list[list[Point]] = [[] for _ in range(cluster_count)]
    iterations = 0
    changed = True
    while changed and iterations < max_iterations:
        changed = False
        iterations += 1
        clusters = [[] for _ in range(cluster_count)]
        for point in points:
            clusters[_nearest_center(point, centers)].append(point)

        for index, members in enumerate(clusters):
            if not members:
                continue
            new_center = coordinate_centroid([(member.lat, member.lng) for member in members])
            if (
                abs(new_center[0] - centers[index][0]) > tolerance
                or abs(new_center[1] - centers[index][1]) > tolerance
            ):
                centers[index] = new_center
                changed = True

    logger.debug("Clustering of %d points converged after %d iteration(s)", len(points), iterations)
    rebalanced = _rebalance_empty_clusters(clusters)
    return ClusterAssignment(clusters=clusters, centers=centers, iterations=iterations, rebalanced=rebalanced)


def _driver_id(index: int, driver_ids: Optional[Sequence[str]]) -> str:
    if driver_ids and index < len(driver_ids) and driver_ids[index]:
        return driver_ids[index]
    return f"driver_{index}"


def partition_and_optimize(
    points: Sequence[Point],
    driver_count: int,
    start_points: Optional[Sequence[Optional[Point]]] = None,
    *,
    optimizer: RouteOptimizer | None = None,
    rng: np.random.Generator | None = None,
    driver_ids: Optional[Sequence[str]] = None,
    max_workers: int | None = None,
) -> list[DriverRoute]:
    """Return exactly ``driver_count`` driver routes covering every point once."""
    if isinstance(driver_count, bool) or not isinstance(driver_count, int) or driver_count < 1:
        raise InvalidInputError(f"driver_count must be an integer >= 1, got {driver_count!r}")
    validate_points(points)

    if len(points) <= driver_count:
        return [
            DriverRoute(
                driver_index=index,
                driver_id=_driver_id(index, driver_ids),
                route=summarize_route(points[index : index + 1], strategy="trivial"),
            )
            for index in range(driver_count)
        ]

    assignment = cluster_points(points, driver_count, rng=rng)
    logger.info("Partitioned %d points between %d drivers: %s", len(points), driver_count, assignment.sizes())

    optimizer = optimizer or RouteOptimizer()
    starts = list(start_points or [])

    def run(index: int) -> RouteResult:
        cluster = assignment.clusters[index]
        if not cluster:
            return RouteResult.empty()
        start = starts[index] if index < len(starts) else None
        return optimizer.optimize(cluster, start)

    workers = max(1, min(max_workers or settings.max_parallel_drivers, driver_count))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        routes = list(executor.map(run, range(driver_count)))

    return [
        DriverRoute(
            driver_index=index,
            driver_id=_driver_id(index, driver_ids),
            route=route,
            rebalanced=index in assignment.rebalanced,
        )
        for index, route in enumerate(routes)
    ]
