"""Cafe likes."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.cafe import Cafe
from app.models.like import Like
from app.schemas.like import LikedCafe, LikeStatus

logger = logging.getLogger(__name__)


def _find_like(db: Session, user_id: str, cafe_id: str) -> Like | None:
    return db.execute(
        select(Like).where(Like.user_id == user_id, Like.cafe_id == cafe_id).limit(1)
    ).scalar_one_or_none()


def get_like_status(db: Session, user_id: str, cafe_id: str) -> LikeStatus:
    like = _find_like(db, user_id, cafe_id)
    return LikeStatus(is_liked=like is not None, like_id=like.id if like else None)


def add_like(db: Session, user_id: str, cafe_id: str) -> tuple[Like, bool]:
    """Like a cafe; liking twice returns the existing like. Returns (like, created)."""
    if db.get(Cafe, cafe_id) is None:
        raise NotFoundError(f"Cafe {cafe_id} not found")
    existing = _find_like(db, user_id, cafe_id)
    if existing is not None:
        return existing, False

    like = Like(user_id=user_id, cafe_id=cafe_id)
    try:
        db.add(like)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Like for user %s / cafe %s already exists", user_id, cafe_id)
        return _find_like(db, user_id, cafe_id), False
    db.refresh(like)
    return like, True


def remove_like(db: Session, user_id: str, cafe_id: str) -> int:
    """Remove the user's like; returns how many rows were deleted (0 or 1)."""
    try:
        result = db.execute(delete(Like).where(Like.user_id == user_id, Like.cafe_id == cafe_id))
        db.commit()
    except Exception:
        db.rollback()
        raise
    return result.rowcount or 0


def like_count(db: Session, cafe_id: str) -> int:
    return db.execute(select(func.count(Like.id)).where(Like.cafe_id == cafe_id)).scalar_one()


def list_liked_cafes(db: Session, user_id: str) -> list[LikedCafe]:
    """Cafes the user liked, most recent like first."""
    rows = db.execute(
        select(Cafe, Like.created_at)
        .join(Like, Like.cafe_id == Cafe.id)
        .where(Like.user_id == user_id)
        .order_by(Like.created_at.desc(), Like.id.desc())
    ).all()
    return [
        LikedCafe(id=cafe.id, name=cafe.name, address=cafe.address, rating=cafe.rating, liked_at=liked_at)
        for cafe, liked_at in rows
    ]
