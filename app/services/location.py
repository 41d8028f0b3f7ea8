"""Client geolocation fallback and the header location label."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from app.core.config import settings
from app.core.exceptions import MissingCoordinatesError, UpstreamError
from app.services.kakao import DEFAULT_LOCATION_LABEL, KakaoLocalService

logger = logging.getLogger(__name__)

NO_LOCATION_LABEL = "위치 정보 없음"


class GeolocationFailure(str, Enum):
    """Why the browser could not give us a position."""

    permission_denied = "permission_denied"
    position_unavailable = "position_unavailable"
    timeout = "timeout"
    unsupported = "unsupported"


def resolve_coordinates(
    latitude: Optional[float],
    longitude: Optional[float],
    failure: Optional[GeolocationFailure] = None,
) -> tuple[float, float, bool]:
    """Return ``(lat, lng, used_fallback)``.

    Any reported geolocation failure maps to the configured default
    coordinate. Without a failure, both coordinates are required.
    """
    if failure is not None:
        logger.info("Geolocation failed (%s); using default coordinate", failure.value)
        return settings.default_latitude, settings.default_longitude, True
    if latitude is None or longitude is None:
        raise MissingCoordinatesError()
    return latitude, longitude, False


async def location_label(
    places: KakaoLocalService, latitude: float, longitude: float, used_fallback: bool = False
) -> str:
    if used_fallback:
        return NO_LOCATION_LABEL
    try:
        return await places.reverse_geocode(latitude, longitude)
    except UpstreamError:
        logger.warning("Reverse geocoding failed for (%.5f, %.5f)", latitude, longitude, exc_info=True)
        return DEFAULT_LOCATION_LABEL
