"""Schemas for likes."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class LikeStatus(BaseModel):
    is_liked: bool
    like_id: Optional[int] = None


class LikeSummary(BaseModel):
    cafe_id: str
    count: int
    status: Optional[LikeStatus] = None


class LikeOut(BaseModel):
    id: int
    user_id: str
    cafe_id: str
    created_at: datetime

    model_config = {"from_attributes": True}


class LikedCafe(BaseModel):
    id: str
    name: str
    address: str
    rating: Optional[float] = None
    liked_at: datetime
