"""Schemas for review submission and listing."""

from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.features import CafeFeatures


class StayDuration(str, Enum):
    under_1h = "under_1h"
    one_to_two = "1_2h"
    two_to_four = "2_4h"
    over_4h = "over_4h"


class ReviewCreate(BaseModel):
    cafe_name: str = Field(..., min_length=1, description="카페 이름")
    cafe_address: str = Field(..., min_length=1, description="카페 주소")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1)
    purpose: Optional[str] = Field(None, description="방문 목적 (공부, 업무, 미팅 ...)")
    features: CafeFeatures = Field(default_factory=CafeFeatures)
    visit_date: Optional[date] = None
    visit_time: Optional[time] = None
    stay_duration: Optional[StayDuration] = None
    price_satisfaction: Optional[int] = Field(None, ge=1, le=5)
    overall_satisfaction: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("cafe_name", "cafe_address", "comment")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _features(cls, value):
        return CafeFeatures.coerce(value)


class ReviewOut(BaseModel):
    id: int
    cafe_id: str
    user_id: str
    user_name: str
    rating: int
    comment: str
    purpose: Optional[str] = None
    features: CafeFeatures
    visit_date: Optional[date] = None
    visit_time: Optional[time] = None
    stay_duration: Optional[StayDuration] = None
    price_satisfaction: Optional[int] = None
    overall_satisfaction: Optional[int] = None
    created_at: datetime

    @classmethod
    def from_row(cls, review) -> "ReviewOut":
        return cls(
            id=review.id,
            cafe_id=review.cafe_id,
            user_id=review.user_id,
            user_name=review.user_name,
            rating=review.rating,
            comment=review.comment,
            purpose=review.purpose,
            features=CafeFeatures.from_row(review),
            visit_date=review.visit_date,
            visit_time=review.visit_time,
            stay_duration=review.stay_duration,
            price_satisfaction=review.price_satisfaction,
            overall_satisfaction=review.overall_satisfaction,
            created_at=review.created_at,
        )


class SubmittedReview(BaseModel):
    review: ReviewOut
    cafe_id: str
    cafe_created: bool
    cafe_rating: Optional[float]
    cafe_review_count: int


class UserReview(BaseModel):
    """A review in the author's profile list."""

    id: int
    cafe_id: str
    cafe_name: str
    rating: int
    comment: str
    created_at: datetime
