"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class RouteLeg:
    from_id: str
    to_id: str
    distance_km: float
    duration_minutes: float
    duration_in_traffic_minutes: Optional[float] = None


@dataclass(frozen=True, slots=True)
class RouteResult:
    ordered_ids: Tuple[str, ...]
    total_distance_km: float
    total_duration_minutes: float
    legs: Tuple[RouteLeg, ...]
    strategy: str = "trivial"
    fallbacks: Tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.fallbacks)

    @property
    def stop_count(self) -> int:
        return len(self.ordered_ids)

    def with_fallbacks(self, fallbacks: Tuple[str, ...]) -> "RouteResult":
        return replace(self, fallbacks=tuple(fallbacks))

    @classmethod
    def empty(cls) -> "RouteResult":
        return cls(ordered_ids=(), total_distance_km=0.0, total_duration_minutes=0.0, legs=())


@dataclass(frozen=True, slots=True)
class DriverRoute:
    driver_index: int
    driver_id: str
    route: RouteResult = field(default_factory=RouteResult.empty)
    rebalanced: bool = False

    @property
    def ordered_ids(self) -> Tuple[str, ...]:
        return self.route.ordered_ids

    @property
    def is_empty(self) -> bool:
        return not self.route.ordered_ids
