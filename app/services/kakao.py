"""Kakao Local REST API client (place search + reverse geocoding)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from app.core.config import settings
from app.core.exceptions import UpstreamError
from app.schemas.place import PlaceResult

logger = logging.getLogger(__name__)

CAFE_CATEGORY = "CE7"
DEFAULT_LOCATION_LABEL = "내 위치"
# Kakao Local 페이지당 최대 문서 수
MAX_PAGE_SIZE = 15


class KakaoLocalService:
    """Wrapper around the Kakao Local search and geocoding endpoints."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.kakao_rest_api_key
        self._base_url = (base_url or settings.kakao_api_base_url).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds or settings.kakao_timeout_seconds)

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise UpstreamError("KAKAO_REST_API_KEY is not configured.")
        url = f"{self._base_url}{path}"
        headers = {"Authorization": f"KakaoAK {self._api_key}"}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(url, params=params, headers=headers) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise UpstreamError(f"Kakao {path} returned {response.status}: {body[:200]}")
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise UpstreamError(f"Kakao {path} request failed: {exc}") from exc
        if not isinstance(data, dict):
            raise UpstreamError(f"Kakao {path} returned a malformed body")
        return data

    @staticmethod
    def _places(data: dict[str, Any]) -> list[PlaceResult]:
        places = []
        for doc in data.get("documents") or []:
            try:
                places.append(PlaceResult.from_document(doc))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed Kakao document: %s", doc.get("id"))
        return places

    async def search_keyword(
        self,
        query: str,
        latitude: float | None = None,
        longitude: float | None = None,
        radius: int = 1000,
        size: int = MAX_PAGE_SIZE,
    ) -> list[PlaceResult]:
        """Keyword search, biased to a coordinate when one is given."""
        params: dict[str, Any] = {"query": query, "size": min(size, MAX_PAGE_SIZE)}
        if latitude is not None and longitude is not None:
            params.update({"y": latitude, "x": longitude, "radius": radius})
        data = await self._get("/v2/local/search/keyword.json", params)
        return self._places(data)

    async def search_category(
        self,
        latitude: float,
        longitude: float,
        category: str = CAFE_CATEGORY,
        radius: int = 1000,
        size: int = MAX_PAGE_SIZE,
        sort: str = "distance",
    ) -> list[PlaceResult]:
        """Category search around a coordinate, nearest first by default."""
        data = await self._get(
            "/v2/local/search/category.json",
            {
                "category_group_code": category,
                "y": latitude,
                "x": longitude,
                "radius": radius,
                "size": min(size, MAX_PAGE_SIZE),
                "sort": sort,
            },
        )
        return self._places(data)

    async def find_best_match(
        self, name: str, latitude: float | None = None, longitude: float | None = None
    ) -> PlaceResult | None:
        """Return the single best keyword match for ``name``."""
        places = await self.search_keyword(name, latitude, longitude, size=1)
        return places[0] if places else None

    async def reverse_geocode(self, latitude: float, longitude: float) -> str:
        """Return a "구 동" style locality label for a coordinate."""
        data = await self._get(
            "/v2/local/geo/coord2address.json",
            {"x": longitude, "y": latitude},
        )
        return parse_locality(data)


def parse_locality(data: dict[str, Any]) -> str:
    """Pick the locality out of a coord2address response.

    Uses region_2depth/region_3depth when present, otherwise the 2nd and 3rd
    tokens of the full address name.
    """
    documents = data.get("documents") or []
    if not documents:
        return DEFAULT_LOCATION_LABEL
    doc = documents[0]
    address = doc.get("address") or {}
    region_2 = address.get("region_2depth_name")
    region_3 = address.get("region_3depth_name")
    if region_2 and region_3:
        return f"{region_2} {region_3}"

    full_address = (
        address.get("address_name")
        or (doc.get("road_address") or {}).get("address_name")
        or DEFAULT_LOCATION_LABEL
    )
    parts = full_address.split(" ")
    return f"{parts[1]} {parts[2]}" if len(parts) >= 3 else full_address


_kakao_service_instance: KakaoLocalService | None = None


def get_kakao_service() -> KakaoLocalService:
    """Lazy initialization of the Kakao service."""
    global _kakao_service_instance
    if _kakao_service_instance is None:
        _kakao_service_instance = KakaoLocalService()
    return _kakao_service_instance
