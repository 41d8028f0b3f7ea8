"""Nearby cafe aggregation.

Blends highly rated cafes from our own table with live Kakao results:

1. repository cafes inside a bounding box with rating >= threshold, then an
   exact haversine cut;
2. per-cafe live enrichment (fills missing fields only, failures ignored);
3. live category search, shuffled, minus anything we already store;
4. franchise padding when fewer than ``featured_limit`` repository cafes.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import MissingCoordinatesError
from app.schemas.cafe import CafeCard, CafeFeed, CafeSource
from app.schemas.place import PlaceResult
from app.services import cafe_repository
from app.services.geo import haversine_m
from app.services.identity import cafe_key
from app.services.kakao import KakaoLocalService
from app.services.memo import TTLMemo

logger = logging.getLogger(__name__)


def _load_repository(
    db: Session, latitude: float, longitude: float, config: Settings
) -> tuple[list[CafeCard], set[tuple[str, str]]]:
    """Run both repository queries on one session and detach the results."""
    rows = cafe_repository.find_rated_in_box(
        db,
        latitude,
        longitude,
        radius_m=config.search_radius_m,
        min_rating=config.min_display_rating,
        limit=config.featured_limit,
    )
    cards = []
    for cafe in rows:
        if cafe.latitude is None or cafe.longitude is None:
            continue
        distance = haversine_m(latitude, longitude, cafe.latitude, cafe.longitude)
        # 박스는 근사치라 정확한 거리로 다시 거른다
        if distance <= config.search_radius_m:
            cards.append(cafe_repository.to_card(cafe, distance_m=round(distance, 1)))
    return cards, cafe_repository.existing_keys(db)


def place_to_card(place: PlaceResult, source: CafeSource) -> CafeCard:
    return CafeCard(
        id=f"kakao-{place.kakao_id}",
        name=place.name,
        address=place.address,
        latitude=place.latitude,
        longitude=place.longitude,
        distance_m=place.distance_m,
        place_url=place.place_url,
        source=source,
        from_db=False,
    )


async def _enrich(card: CafeCard, places: KakaoLocalService, latitude: float, longitude: float) -> CafeCard:
    """Fill missing location fields from the best live match; never overwrite."""
    if card.latitude is not None and card.longitude is not None and card.place_url:
        return card
    try:
        match = await places.find_best_match(card.name, latitude, longitude)
    except Exception:  # noqa: BLE001
        logger.warning("Enrichment lookup failed for cafe %s (%s)", card.id, card.name, exc_info=True)
        return card
    if match is None:
        return card

    updates = {}
    if card.latitude is None:
        updates["latitude"] = match.latitude
    if card.longitude is None:
        updates["longitude"] = match.longitude
    if not card.place_url and match.place_url:
        updates["place_url"] = match.place_url
    if card.distance_m is None and match.distance_m is not None:
        updates["distance_m"] = match.distance_m
    return card.model_copy(update=updates) if updates else card


async def _live_search(
    places: KakaoLocalService,
    latitude: float,
    longitude: float,
    config: Settings,
    memo: Optional[TTLMemo],
) -> list[PlaceResult]:
    key = TTLMemo.key_for(latitude, longitude, config.search_radius_m, config.live_search_size)
    if memo is not None:
        cached = memo.get(key)
        if cached is not None:
            return list(cached)
    results = await places.search_category(
        latitude,
        longitude,
        radius=config.search_radius_m,
        size=config.live_search_size,
    )
    if memo is not None:
        memo.set(key, list(results))
    return results


async def _first_brand_hit(
    places: KakaoLocalService, brand: str, latitude: float, longitude: float, radius: int
) -> PlaceResult | None:
    try:
        hits = await places.search_keyword(brand, latitude, longitude, radius=radius, size=1)
    except Exception:  # noqa: BLE001
        logger.warning("Franchise search failed for brand %s", brand, exc_info=True)
        return None
    if not hits:
        logger.info("No nearby %s found", brand)
        return None
    return hits[0]


async def franchise_padding(
    places: KakaoLocalService,
    latitude: float,
    longitude: float,
    needed: int,
    exclude_keys: set[tuple[str, str]],
    config: Settings,
    rng: random.Random,
) -> list[CafeCard]:
    """Nearest location of a few randomly chosen chains, at most ``needed`` of them."""
    if needed <= 0 or not config.franchise_brands:
        return []
    brands = rng.sample(config.franchise_brands, min(config.franchise_pick, len(config.franchise_brands)))
    hits = await asyncio.gather(
        *(_first_brand_hit(places, brand, latitude, longitude, config.search_radius_m) for brand in brands)
    )
    cards: list[CafeCard] = []
    for hit in hits:
        if hit is None or cafe_key(hit.name, hit.address) in exclude_keys:
            continue
        cards.append(place_to_card(hit, CafeSource.franchise))
    return cards[:needed]


async def aggregate_cafes(
    db: Session,
    latitude: float | None,
    longitude: float | None,
    places: KakaoLocalService,
    memo: Optional[TTLMemo] = None,
    rng: Optional[random.Random] = None,
    config: Settings = default_settings,
) -> CafeFeed:
    """Build the nearby cafe list for a coordinate.

    Repository errors and live category search errors propagate; a failed
    enrichment or franchise lookup only drops that one piece.
    """
    if latitude is None or longitude is None:
        raise MissingCoordinatesError()
    rng = rng or random.Random()

    # 세션을 쓰는 스레드가 끝나기 전에 예외를 올리지 않도록 두 작업을 모두 기다림
    repo_result, live_result = await asyncio.gather(
        asyncio.to_thread(_load_repository, db, latitude, longitude, config),
        _live_search(places, latitude, longitude, config, memo),
        return_exceptions=True,
    )
    if isinstance(repo_result, BaseException):
        if isinstance(live_result, BaseException):
            logger.warning("Live category search also failed: %s", live_result)
        raise repo_result
    if isinstance(live_result, BaseException):
        raise live_result
    repo_cards, known_keys = repo_result
    live_places = live_result

    repo_cards = list(
        await asyncio.gather(*(_enrich(card, places, latitude, longitude) for card in repo_cards))
    )

    live_places = list(live_places)
    rng.shuffle(live_places)
    # 이미 DB에 있는 카페는 평점과 무관하게 제외
    live_cards = [
        place_to_card(place, CafeSource.live)
        for place in live_places
        if cafe_key(place.name, place.address) not in known_keys
    ]

    padding: list[CafeCard] = []
    if len(repo_cards) < config.featured_limit:
        repo_keys = {cafe_key(card.name, card.address) for card in repo_cards}
        padding = await franchise_padding(
            places,
            latitude,
            longitude,
            needed=config.featured_limit - len(repo_cards),
            exclude_keys=known_keys | repo_keys,
            config=config,
            rng=rng,
        )

    items: list[CafeCard] = []
    seen: set[tuple[str, str]] = set()
    for card in [*repo_cards, *padding, *live_cards]:
        key = cafe_key(card.name, card.address)
        if key in seen:
            continue
        seen.add(key)
        items.append(card)

    counts = {source: 0 for source in CafeSource}
    for card in items:
        counts[card.source] += 1

    logger.info(
        "Aggregated %d cafes near (%.5f, %.5f): repository=%d franchise=%d live=%d",
        len(items),
        latitude,
        longitude,
        counts[CafeSource.repository],
        counts[CafeSource.franchise],
        counts[CafeSource.live],
    )
    return CafeFeed(
        items=items,
        show_simple_list=counts[CafeSource.repository] == 0,
        repository_count=counts[CafeSource.repository],
        franchise_count=counts[CafeSource.franchise],
        live_count=counts[CafeSource.live],
    )
