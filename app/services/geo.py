"""Great-circle distance and bounding boxes."""

from math import asin, cos, radians, sin, sqrt

EARTH_RADIUS_M = 6_371_000.0
# 위도 1도 ≈ 111.32km
METERS_PER_DEGREE_LAT = 111_320.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the distance between two points in meters."""
    phi1, phi2 = radians(lat1), radians(lat2)
    dlat = phi2 - phi1
    dlon = radians(lon2) - radians(lon1)
    a = sin(dlat / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * asin(sqrt(a))


def bounding_box(latitude: float, longitude: float, radius_m: float) -> tuple[float, float, float, float]:
    """Return (min_lat, max_lat, min_lon, max_lon) enclosing a circle of ``radius_m``.

    The box is a coarse pre-filter; callers re-check with ``haversine_m``.
    """
    dlat = radius_m / METERS_PER_DEGREE_LAT
    # 극지방에서 0으로 나누지 않도록 cos 값 하한
    dlon = radius_m / (METERS_PER_DEGREE_LAT * max(cos(radians(latitude)), 1e-6))
    return latitude - dlat, latitude + dlat, longitude - dlon, longitude + dlon
