"""Address geocoding through a Nominatim-compatible search API."""

from __future__ import annotations

import logging
from functools import lru_cache

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when an address cannot be turned into coordinates."""


def _search(query: str) -> list:
    url = f"{settings.geocoding_base_url.rstrip('/')}/search"
    params = {"q": query, "format": "jsonv2", "limit": 1}
    headers = {"User-Agent": settings.geocoding_user_agent}
    try:
        response = httpx.get(url, params=params, headers=headers, timeout=settings.geocoding_timeout_seconds)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPError as exc:
        raise GeocodingError(f"Geocoding request failed for '{query}': {exc}") from exc
    except ValueError as exc:
        raise GeocodingError(f"Geocoding service returned invalid JSON for '{query}'.") from exc


@lru_cache(maxsize=512)
def geocode_address(address: str) -> tuple[float, float]:
    """Return (latitude, longitude) for free-form address text.

    Successful lookups are cached in memory; failures are not.
    """
    query = " ".join(address.split())
    if not query:
        raise GeocodingError("Address is empty.")

    results = _search(query)
    if not results:
        raise GeocodingError(f"No location found for '{query}'.")
    try:
        lat = float(results[0]["lat"])
        lon = float(results[0]["lon"])
    except (KeyError, TypeError, ValueError, IndexError) as exc:
        raise GeocodingError(f"Geocoding result for '{query}' has no coordinates.") from exc

    logger.debug("Geocoded '%s' to (%.6f, %.6f)", query, lat, lon)
    return lat, lon
