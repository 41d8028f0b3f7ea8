"""Queries against the cafes table."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundError
from app.models.cafe import Cafe
from app.schemas.cafe import CafeCard, CafeDetail, CafeSource
from app.schemas.features import CafeFeatures
from app.schemas.review import ReviewOut
from app.services.geo import bounding_box
from app.services.identity import cafe_key

logger = logging.getLogger(__name__)


def find_rated_in_box(
    db: Session,
    latitude: float,
    longitude: float,
    radius_m: float,
    min_rating: float,
    limit: int,
) -> list[Cafe]:
    """Highly rated cafes whose coordinates fall in the box around a point."""
    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_m)
    stmt = (
        select(Cafe)
        .where(
            Cafe.latitude.between(min_lat, max_lat),
            Cafe.longitude.between(min_lon, max_lon),
            Cafe.rating >= min_rating,
        )
        .order_by(Cafe.rating.desc(), Cafe.review_count.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def existing_keys(db: Session) -> set[tuple[str, str]]:
    """(name, address) keys of every stored cafe, regardless of rating or location."""
    rows = db.execute(select(Cafe.name, Cafe.address)).all()
    return {cafe_key(name, address) for name, address in rows}


def get_cafe(db: Session, cafe_id: str) -> Cafe:
    cafe = db.execute(
        select(Cafe).options(selectinload(Cafe.reviews)).where(Cafe.id == cafe_id)
    ).scalar_one_or_none()
    if cafe is None:
        raise NotFoundError(f"Cafe {cafe_id} not found")
    return cafe


def ensure_cafe(
    db: Session,
    cafe_id: str,
    name: str,
    address: str,
    latitude: float | None = None,
    longitude: float | None = None,
    place_url: str | None = None,
    features: CafeFeatures | None = None,
) -> tuple[str, bool]:
    """Insert the cafe row unless it already exists; return (id, created).

    Runs inside a savepoint so a concurrent insert of the same cafe only
    rolls back this step, not the caller's transaction.
    """
    if db.get(Cafe, cafe_id) is not None:
        return cafe_id, False
    name, address = cafe_key(name, address)
    cafe = Cafe(
        id=cafe_id,
        name=name,
        address=address,
        latitude=latitude,
        longitude=longitude,
        rating=None,
        review_count=0,
        images=[],
        place_url=place_url,
        comments=[],
        **(features or CafeFeatures()).to_columns(),
    )
    try:
        with db.begin_nested():
            db.add(cafe)
    except IntegrityError:
        # 동시에 첫 리뷰가 들어온 경우: 먼저 생성된 행을 사용
        logger.info("Cafe %s (%s) already created by a concurrent submission", cafe_id, name)
        if db.get(Cafe, cafe_id) is not None:
            return cafe_id, False
        existing_id = db.execute(
            select(Cafe.id).where(Cafe.name == name, Cafe.address == address)
        ).scalar_one()
        return existing_id, False
    return cafe_id, True


def to_card(cafe: Cafe, distance_m: float | None = None) -> CafeCard:
    return CafeCard(
        id=cafe.id,
        name=cafe.name,
        address=cafe.address,
        latitude=cafe.latitude,
        longitude=cafe.longitude,
        distance_m=distance_m,
        rating=cafe.rating,
        review_count=cafe.review_count or 0,
        images=list(cafe.images or []),
        place_url=cafe.place_url,
        features=CafeFeatures.from_row(cafe),
        comments=list(cafe.comments or []),
        source=CafeSource.repository,
        from_db=True,
    )


def to_detail(cafe: Cafe) -> CafeDetail:
    return CafeDetail(
        id=cafe.id,
        name=cafe.name,
        address=cafe.address,
        latitude=cafe.latitude,
        longitude=cafe.longitude,
        rating=cafe.rating,
        review_count=cafe.review_count or 0,
        images=list(cafe.images or []),
        place_url=cafe.place_url,
        features=CafeFeatures.from_row(cafe),
        comments=list(cafe.comments or []),
        reviews=[ReviewOut.from_row(r) for r in cafe.reviews],
        created_at=cafe.created_at,
    )
