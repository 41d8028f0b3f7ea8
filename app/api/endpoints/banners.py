"""Ad banner and location label endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.exceptions import MissingCoordinatesError
from app.schemas.banner import BannerSlot, LocationLabel
from app.services.banners import BannerProvider, get_banner_provider
from app.services.kakao import KakaoLocalService, get_kakao_service
from app.services.location import GeolocationFailure, location_label, resolve_coordinates

router = APIRouter(tags=["banners"])


@router.get("/banners/{slot}", response_model=BannerSlot)
def banner_slot(slot: str, provider: BannerProvider = Depends(get_banner_provider)) -> BannerSlot:
    return provider.render_slot(slot)


@router.get("/location", response_model=LocationLabel)
async def current_location(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    geo_error: Optional[GeolocationFailure] = None,
    places: KakaoLocalService = Depends(get_kakao_service),
) -> LocationLabel:
    """Human-readable locality for the header."""
    try:
        latitude, longitude, used_fallback = resolve_coordinates(lat, lng, geo_error)
    except MissingCoordinatesError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    label = await location_label(places, latitude, longitude, used_fallback)
    return LocationLabel(latitude=latitude, longitude=longitude, label=label, used_fallback=used_fallback)
