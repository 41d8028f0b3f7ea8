"""Normalized cafe feature bag.

Feature values reach the service in several shapes: a dict, a one-element
list wrapping a dict, numeric seat counts from older rows, or the Korean
labels the review form sends (있음/없음). ``CafeFeatures.coerce`` folds all
of them into one model so nothing downstream inspects raw shapes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class SeatBucket(str, Enum):
    many = "many"
    some = "some"
    few = "few"


class DeskHeight(str, Enum):
    high = "high"
    low = "low"
    mixed = "mixed"


class OutletLevel(str, Enum):
    many = "many"
    few = "few"
    limited = "limited"
    none = "none"


class WifiQuality(str, Enum):
    excellent = "excellent"
    good = "good"
    average = "average"
    none = "none"


_OUTLET_ALIASES = {"있음": OutletLevel.many, "없음": OutletLevel.none}
_WIFI_ALIASES = {"있음": WifiQuality.good, "없음": WifiQuality.none}


def seat_bucket_for(count: int | float) -> SeatBucket:
    """Bucket a raw seat count."""
    if count >= 40:
        return SeatBucket.many
    if count >= 15:
        return SeatBucket.some
    return SeatBucket.few


def _enum_or_none(enum_cls: type[Enum], value: Any, aliases: dict | None = None):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    if aliases and value in aliases:
        return aliases[value]
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


class CafeFeatures(BaseModel):
    seats: Optional[SeatBucket] = None
    desk_height: Optional[DeskHeight] = None
    outlets: Optional[OutletLevel] = None
    wifi: Optional[WifiQuality] = None
    atmosphere: list[str] = Field(default_factory=list)

    @field_validator("seats", mode="before")
    @classmethod
    def _seats(cls, value: Any) -> Optional[SeatBucket]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return seat_bucket_for(value)
        if isinstance(value, str) and value.strip().isdigit():
            return seat_bucket_for(int(value))
        return _enum_or_none(SeatBucket, value)

    @field_validator("desk_height", mode="before")
    @classmethod
    def _desk_height(cls, value: Any) -> Optional[DeskHeight]:
        return _enum_or_none(DeskHeight, value)

    @field_validator("outlets", mode="before")
    @classmethod
    def _outlets(cls, value: Any) -> Optional[OutletLevel]:
        return _enum_or_none(OutletLevel, value, _OUTLET_ALIASES)

    @field_validator("wifi", mode="before")
    @classmethod
    def _wifi(cls, value: Any) -> Optional[WifiQuality]:
        return _enum_or_none(WifiQuality, value, _WIFI_ALIASES)

    @field_validator("atmosphere", mode="before")
    @classmethod
    def _atmosphere(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if v and str(v).strip()]
        return []

    @classmethod
    def coerce(cls, value: Any) -> "CafeFeatures":
        """Build features from whatever shape the caller has."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if not isinstance(value, dict):
            return cls()
        aliases = {"deskHeight": "desk_height"}
        data = {aliases.get(k, k): v for k, v in value.items()}
        return cls.model_validate({k: data.get(k) for k in cls.model_fields})

    @classmethod
    def from_row(cls, row: Any) -> "CafeFeatures":
        """Read the feature columns shared by Cafe and Review rows."""
        return cls.coerce({name: getattr(row, name, None) for name in cls.model_fields})

    def to_columns(self) -> dict[str, Any]:
        """Column values for a Cafe or Review row."""
        return {
            "seats": self.seats.value if self.seats else None,
            "desk_height": self.desk_height.value if self.desk_height else None,
            "outlets": self.outlets.value if self.outlets else None,
            "wifi": self.wifi.value if self.wifi else None,
            "atmosphere": list(self.atmosphere),
        }
