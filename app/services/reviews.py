"""Review submission and management."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ReviewSubmissionError
from app.models.cafe import Cafe
from app.models.review import Review
from app.schemas.place import PlaceResult
from app.schemas.review import ReviewCreate, ReviewOut, SubmittedReview, UserReview
from app.schemas.user import UserOut
from app.services import cafe_repository
from app.services.identity import derive_cafe_id
from app.services.kakao import KakaoLocalService

logger = logging.getLogger(__name__)

RECENT_COMMENT_COUNT = 5


def recompute_rating(db: Session, cafe_id: str) -> Cafe:
    """Recompute the cafe's mean rating, review count and recent comments.

    Reads every review row for the cafe, so pending inserts must be flushed first.
    """
    cafe = db.get(Cafe, cafe_id)
    if cafe is None:
        raise NotFoundError(f"Cafe {cafe_id} not found")
    rows = db.execute(
        select(Review.rating, Review.comment)
        .where(Review.cafe_id == cafe_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    ).all()
    ratings = [rating for rating, _comment in rows]
    cafe.rating = sum(ratings) / len(ratings) if ratings else None
    cafe.review_count = len(ratings)
    cafe.comments = [comment for _rating, comment in rows if comment][:RECENT_COMMENT_COUNT]
    return cafe


async def _backfill_location(
    places: Optional[KakaoLocalService], payload: ReviewCreate
) -> Optional[PlaceResult]:
    """Look the cafe up on Kakao when the client sent no coordinates."""
    if places is None:
        return None
    try:
        return await places.find_best_match(f"{payload.cafe_name} {payload.cafe_address}")
    except Exception:  # noqa: BLE001
        logger.warning("Location backfill failed for %s", payload.cafe_name, exc_info=True)
        return None


async def submit_review(
    db: Session,
    payload: ReviewCreate,
    user: UserOut,
    places: Optional[KakaoLocalService] = None,
) -> SubmittedReview:
    """Ensure the cafe exists, add the review and refresh the cafe's rating.

    The cafe insert, review insert and rating update commit together; on any
    failure all three are rolled back.
    """
    cafe_id = derive_cafe_id(payload.cafe_name, payload.cafe_address)
    exists = db.get(Cafe, cafe_id) is not None

    latitude, longitude, place_url = payload.latitude, payload.longitude, None
    if not exists and (latitude is None or longitude is None):
        location = await _backfill_location(places, payload)
        if location is not None:
            latitude, longitude, place_url = location.latitude, location.longitude, location.place_url

    try:
        created = False
        if not exists:
            cafe_id, created = cafe_repository.ensure_cafe(
                db,
                cafe_id,
                payload.cafe_name,
                payload.cafe_address,
                latitude=latitude,
                longitude=longitude,
                place_url=place_url,
                features=payload.features,
            )

        review = Review(
            cafe_id=cafe_id,
            user_id=user.id,
            user_name=user.nickname,
            rating=payload.rating,
            comment=payload.comment,
            purpose=payload.purpose,
            visit_date=payload.visit_date,
            visit_time=payload.visit_time,
            stay_duration=payload.stay_duration.value if payload.stay_duration else None,
            price_satisfaction=payload.price_satisfaction,
            overall_satisfaction=payload.overall_satisfaction,
            **payload.features.to_columns(),
        )
        db.add(review)
        db.flush()

        cafe = recompute_rating(db, cafe_id)
        db.commit()
        db.refresh(review)
    except Exception as exc:
        db.rollback()
        logger.exception("Review submission failed for cafe %s", cafe_id)
        raise ReviewSubmissionError("리뷰 제출에 실패했습니다. 다시 시도해주세요.") from exc

    logger.info(
        "Review %s saved for cafe %s (created=%s, rating=%s, count=%s)",
        review.id,
        cafe_id,
        created,
        cafe.rating,
        cafe.review_count,
    )
    return SubmittedReview(
        review=ReviewOut.from_row(review),
        cafe_id=cafe_id,
        cafe_created=created,
        cafe_rating=cafe.rating,
        cafe_review_count=cafe.review_count,
    )


def list_cafe_reviews(db: Session, cafe_id: str) -> list[ReviewOut]:
    if db.get(Cafe, cafe_id) is None:
        raise NotFoundError(f"Cafe {cafe_id} not found")
    rows = db.execute(
        select(Review)
        .where(Review.cafe_id == cafe_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    ).scalars().all()
    return [ReviewOut.from_row(r) for r in rows]


def list_user_reviews(db: Session, user_id: str) -> list[UserReview]:
    """Reviews written by a user, newest first."""
    rows = db.execute(
        select(Review, Cafe.name)
        .join(Cafe, Cafe.id == Review.cafe_id)
        .where(Review.user_id == user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    ).all()
    return [
        UserReview(
            id=review.id,
            cafe_id=review.cafe_id,
            cafe_name=cafe_name,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )
        for review, cafe_name in rows
    ]


def delete_review(db: Session, review_id: int, user_id: str) -> Cafe:
    """Delete one of the user's own reviews and refresh the cafe's rating."""
    review = db.get(Review, review_id)
    # 본인이 작성한 리뷰만 삭제 가능
    if review is None or review.user_id != user_id:
        raise NotFoundError(f"Review {review_id} not found")
    cafe_id = review.cafe_id
    try:
        db.delete(review)
        db.flush()
        cafe = recompute_rating(db, cafe_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return cafe
