"""HTTP client for the OSRM trip (waypoint optimization) service."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings
from .exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class OSRMClient:
    """Calls OSRM's ``trip`` endpoint with a fixed origin and destination.

    A single attempt is made per call; the optimizer decides what to do when
    it fails.
    """

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.directions_base_url
        if not self.base_url:
            raise ExternalServiceError("Directions service base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.profile = profile or settings.directions_profile
        self.timeout = timeout if timeout is not None else settings.directions_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self._transport,
        )

    def trip(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Ask OSRM to reorder the intermediate coordinates of a route.

        Args:
            coordinates: (lat, lon) tuples; the first is the origin and the
                last the destination.

        Returns:
            The decoded OSRM response with ``waypoints`` and ``trips``.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for an OSRM trip.")

        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        params = {
            "source": "first",
            "destination": "last",
            "roundtrip": "false",
            "steps": "false",
            "overview": "false",
            "annotations": "false",
        }
        url = f"{self.base_url}/trip/v1/{self.profile}/{coordinate_str}"

        client = self._get_client()
        try:
            response = client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            raise ExternalServiceError(
                f"OSRM trip request timed out after {self.timeout:.0f}s"
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                f"OSRM trip request failed with HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, OSError) as exc:
            raise ExternalServiceError(f"Failed to reach OSRM service at {self.base_url}: {exc}") from exc
        except ValueError as exc:
            raise ExternalServiceError("OSRM returned a response that is not JSON.") from exc
        finally:
            client.close()

        if not isinstance(data, dict):
            raise ExternalServiceError("OSRM returned an unexpected payload.")
        if data.get("code") != "Ok":
            message = data.get("message") or data.get("code") or "Unknown OSRM trip error"
            raise ExternalServiceError(f"OSRM trip request failed: {message}")
        return data


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM reachability with a minimal two-point trip."""
    base = base_url or settings.directions_base_url
    if not base:
        return False
    try:
        client = OSRMClient(base_url=base, timeout=5.0)
        data = client.trip([(52.517037, 13.388860), (52.496891, 13.385983)])
    except ExternalServiceError as exc:
        logger.info("Directions service health check failed: %s", exc)
        return False
    return bool(data.get("trips"))
