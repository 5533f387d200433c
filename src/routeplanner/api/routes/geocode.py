"""Geocoding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import GeocodeRequest, GeocodeResponse
from ...services.geocoding import GeocodingError, geocode_address

router = APIRouter(prefix="/geocode", tags=["geocoding"])


@router.post("", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
def geocode(payload: GeocodeRequest) -> GeocodeResponse:
    try:
        lat, lng = geocode_address(payload.address)
    except GeocodingError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return GeocodeResponse(address=payload.address, lat=lat, lng=lng)
