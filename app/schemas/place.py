"""Schemas for Kakao Local search results."""

from typing import Any, Optional

from pydantic import BaseModel


class PlaceResult(BaseModel):
    """A single place document returned by Kakao Local."""

    kakao_id: str
    name: str
    address: str
    latitude: float
    longitude: float
    distance_m: Optional[float] = None
    place_url: Optional[str] = None

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "PlaceResult":
        distance = doc.get("distance")
        return cls(
            kakao_id=str(doc["id"]),
            name=doc["place_name"],
            address=doc.get("road_address_name") or doc.get("address_name") or "",
            latitude=float(doc["y"]),
            longitude=float(doc["x"]),
            distance_m=float(distance) if distance not in (None, "") else None,
            place_url=doc.get("place_url") or None,
        )
