"""Domain models for the locations a route visits."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional


@dataclass(frozen=True, slots=True)
class Point:
    """A geocoded location to visit.

    ``fixed_arrival_time`` marks an appointment; its presence on any point of a
    request switches the whole route to chronological ordering.
    ``arrival_window_minutes`` is informational and never affects ordering.
    """

    id: str
    lat: float
    lng: float
    service_duration_minutes: float = 0.0
    fixed_arrival_time: Optional[datetime] = None
    arrival_window_minutes: Optional[float] = None
    address: Optional[str] = None

    @property
    def has_appointment(self) -> bool:
        return self.fixed_arrival_time is not None

    @property
    def label(self) -> str:
        return self.address or self.id

    def appointment_sort_key(self) -> datetime:
        """Arrival time normalised to an aware UTC datetime (naive values are taken as UTC)."""
        if self.fixed_arrival_time is None:
            raise ValueError(f"Point '{self.id}' has no fixed arrival time.")
        moment = self.fixed_arrival_time
        if moment.tzinfo is None:
            return moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc)


def duplicate_ids(points: Iterable[Point]) -> list[str]:
    counts = Counter(point.id for point in points)
    return sorted(pid for pid, count in counts.items() if count > 1)
