"""Pydantic schemas for cafes."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.features import CafeFeatures
from app.schemas.review import ReviewOut


class CafeSource(str, Enum):
    repository = "repository"
    franchise = "franchise"
    live = "live"


class CafeCard(BaseModel):
    """A cafe as shown in the nearby list."""

    id: str
    name: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_m: Optional[float] = None
    rating: Optional[float] = None
    review_count: int = 0
    images: list[str] = Field(default_factory=list)
    place_url: Optional[str] = None
    features: CafeFeatures = Field(default_factory=CafeFeatures)
    comments: list[str] = Field(default_factory=list)
    source: CafeSource
    # 응답용 플래그, DB에는 저장하지 않음
    from_db: bool = False


class CafeFeed(BaseModel):
    """Response of the nearby aggregation."""

    items: list[CafeCard]
    location_label: Optional[str] = None
    used_fallback_location: bool = False
    show_simple_list: bool = False
    banner_after_index: int = 1
    repository_count: int = 0
    franchise_count: int = 0
    live_count: int = 0


class CafeDetail(BaseModel):
    id: str
    name: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    review_count: int
    images: list[str]
    place_url: Optional[str] = None
    features: CafeFeatures
    comments: list[str]
    reviews: list[ReviewOut]
    created_at: datetime
