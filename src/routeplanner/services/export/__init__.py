"""Export services."""

from .geojson import routes_to_feature_collection, save_geojson
from .gpx import routes_to_gpx

__all__ = [
    "routes_to_feature_collection",
    "routes_to_gpx",
    "save_geojson",
]
