"""Schemas for ad banner slots."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class BannerSlot(BaseModel):
    slot: str
    provider: str
    label: str = "광고"
    title: Optional[str] = None
    body: Optional[str] = None
    cta_text: Optional[str] = None
    cta_url: Optional[str] = None
    embed: dict[str, Any] = Field(default_factory=dict)


class LocationLabel(BaseModel):
    latitude: float
    longitude: float
    label: str
    used_fallback: bool
