#!/usr/bin/env python3
"""Manual check that the configured directions service can optimize a trip."""

import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from routeplanner.config import settings
from routeplanner.models.domain import Point
from routeplanner.services.routing.exceptions import ExternalServiceError
from routeplanner.services.routing.external import ExternalRoutingAdapter
from routeplanner.services.routing.osrm_client import check_health


def main():
    print("=" * 60)
    print("Directions Service Check")
    print("=" * 60)
    print()

    print("1. Checking configuration...")
    if not settings.directions_base_url:
        print("   [ERROR] Directions base URL is not configured")
        print("   Please set ROUTEPLANNER_DIRECTIONS_BASE_URL in your .env file")
        return 1
    print(f"   [OK] Base URL: {settings.directions_base_url}")
    print(f"   [OK] Profile: {settings.directions_profile}")
    print()

    print("2. Testing health check...")
    if not check_health():
        print("   [ERROR] Directions service is not responding")
        return 1
    print("   [OK] Directions service is reachable")
    print()

    print("3. Optimizing a sample trip...")
    points = [
        Point(id="origin", lat=52.517037, lng=13.388860),
        Point(id="far", lat=52.529407, lng=13.397634),
        Point(id="near", lat=52.516681, lng=13.376996),
        Point(id="destination", lat=52.496891, lng=13.385983),
    ]
    try:
        result = ExternalRoutingAdapter().optimize(points)
    except ExternalServiceError as e:
        print(f"   [ERROR] Trip request failed: {e}")
        return 1
    print(f"   [OK] Order: {' -> '.join(result.ordered_ids)}")
    print(f"   [OK] Distance: {result.total_distance_km:.2f} km, duration: {result.total_duration_minutes:.1f} min")
    print()

    print("=" * 60)
    print("[SUCCESS] Directions service is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
