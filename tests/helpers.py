"""Builders and fakes shared by the test modules."""
from app.core.exceptions import AuthenticationError, UpstreamError
from app.models.cafe import Cafe
from app.schemas.place import PlaceResult
from app.services.identity import derive_cafe_id

GANGNAM = (37.5017, 127.0269)


def make_place(kakao_id, name, address, lat=GANGNAM[0], lng=GANGNAM[1], distance=100.0, url=None):
    return PlaceResult(
        kakao_id=str(kakao_id),
        name=name,
        address=address,
        latitude=lat,
        longitude=lng,
        distance_m=distance,
        place_url=url or f"http://place.map.kakao.com/{kakao_id}",
    )


def make_cafe(db, name, address, lat=GANGNAM[0], lng=GANGNAM[1], rating=4.0, review_count=1, **extra):
    cafe = Cafe(
        id=derive_cafe_id(name, address),
        name=name,
        address=address,
        latitude=lat,
        longitude=lng,
        rating=rating,
        review_count=review_count,
        images=[],
        comments=[],
        atmosphere=[],
        **extra,
    )
    db.add(cafe)
    db.commit()
    return cafe


class FakeKakao:
    """Stand-in for KakaoLocalService that records every call."""

    def __init__(self, category=None, keyword=None, fail_keywords=(), fail_category=False, locality="강남구 역삼동"):
        self.category = list(category or [])
        self.keyword = dict(keyword or {})
        self.fail_keywords = set(fail_keywords)
        self.fail_category = fail_category
        self.locality = locality
        self.category_calls = 0
        self.keyword_calls = []

    async def search_category(self, latitude, longitude, category="CE7", radius=1000, size=15, sort="distance"):
        self.category_calls += 1
        if self.fail_category:
            raise UpstreamError("category search failed")
        return list(self.category[:size])

    async def search_keyword(self, query, latitude=None, longitude=None, radius=1000, size=15):
        self.keyword_calls.append(query)
        if query in self.fail_keywords:
            raise UpstreamError(f"keyword search failed: {query}")
        return list(self.keyword.get(query, []))[:size]

    async def find_best_match(self, name, latitude=None, longitude=None):
        hits = await self.search_keyword(name, latitude, longitude, size=1)
        return hits[0] if hits else None

    async def reverse_geocode(self, latitude, longitude):
        if self.locality is None:
            raise UpstreamError("geocode failed")
        return self.locality


class FakeAuthClient:
    """Stand-in for SupabaseAuthClient keyed by access token."""

    def __init__(self, identities=None):
        self.identities = dict(identities or {})
        self.calls = 0

    async def get_user(self, access_token):
        self.calls += 1
        identity = self.identities.get(access_token)
        if identity is None:
            raise AuthenticationError("인증에 실패했습니다.")
        return identity
