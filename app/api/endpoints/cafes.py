"""Cafe endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import get_live_search_memo
from app.core.exceptions import MissingCoordinatesError, NotFoundError, UpstreamError
from app.db.session import get_db
from app.schemas.cafe import CafeDetail, CafeFeed
from app.schemas.review import ReviewOut
from app.services import cafe_repository
from app.services.aggregation import aggregate_cafes
from app.services.kakao import KakaoLocalService, get_kakao_service
from app.services.location import GeolocationFailure, location_label, resolve_coordinates
from app.services.memo import TTLMemo
from app.services.reviews import list_cafe_reviews

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cafes", tags=["cafes"])


@router.get("/nearby", response_model=CafeFeed)
async def nearby_cafes(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="위도"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="경도"),
    geo_error: Optional[GeolocationFailure] = Query(None, description="브라우저 위치 조회 실패 사유"),
    db: Session = Depends(get_db),
    places: KakaoLocalService = Depends(get_kakao_service),
    memo: TTLMemo = Depends(get_live_search_memo),
) -> CafeFeed:
    """Cafes to show around the user's position."""
    try:
        latitude, longitude, used_fallback = resolve_coordinates(lat, lng, geo_error)
        feed = await aggregate_cafes(db, latitude, longitude, places, memo=memo)
    except MissingCoordinatesError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UpstreamError as exc:
        logger.exception("Live cafe search failed")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        logger.exception("Cafe repository query failed")
        raise HTTPException(status_code=503, detail="카페 데이터를 불러오지 못했습니다.") from exc

    feed.location_label = await location_label(places, latitude, longitude, used_fallback)
    feed.used_fallback_location = used_fallback
    return feed


@router.get("/{cafe_id}", response_model=CafeDetail)
def get_cafe(cafe_id: str, db: Session = Depends(get_db)) -> CafeDetail:
    """Cafe detail with its reviews."""
    try:
        cafe = cafe_repository.get_cafe(db, cafe_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return cafe_repository.to_detail(cafe)


@router.get("/{cafe_id}/reviews", response_model=list[ReviewOut])
def get_cafe_reviews(cafe_id: str, db: Session = Depends(get_db)) -> list[ReviewOut]:
    try:
        return list_cafe_reviews(db, cafe_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
