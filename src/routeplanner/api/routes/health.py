"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_directions_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as directions_health_check
    return directions_health_check


@router.get("/health/directions", status_code=status.HTTP_200_OK)
def health_directions() -> dict:
    """Check the external directions service; routing still works without it."""
    if not settings.directions_base_url:
        return {"service": "directions", "configured": False, "healthy": False}
    try:
        directions_health_check = _get_directions_health_check()
        return {"service": "directions", "configured": True, "healthy": directions_health_check()}
    except Exception as e:
        return {"service": "directions", "configured": True, "healthy": False, "error": str(e)}
