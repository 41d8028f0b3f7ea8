"""
Endpoint tests: error mapping, auth flow and the review/like round trip
"""
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.db.session import get_db
from app.main import app
from app.services.auth import get_auth_client
from app.services.kakao import get_kakao_service
from app.services.memo import TTLMemo
from tests.helpers import FakeAuthClient, FakeKakao, make_cafe, make_place

API = settings.api_v1_prefix
TOKEN = "kakao-access-token"


@pytest.fixture
def kakao():
    return FakeKakao(category=[make_place(1, "동네카페", "서울 강남구 봉은사로 1")])


@pytest.fixture
def auth_client(kakao_identity):
    return FakeAuthClient({TOKEN: kakao_identity})


@pytest.fixture
def client(db, kakao, auth_client):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_kakao_service] = lambda: kakao
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.state.live_search_memo = TTLMemo(300)
    app.state.session_cache.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth():
    return {"Authorization": f"Bearer {TOKEN}"}


class TestNearbyEndpoint:

    def test_missing_coordinates_is_bad_request(self, client, kakao):
        response = client.get(f"{API}/cafes/nearby")
        assert response.status_code == 400
        assert kakao.category_calls == 0

    def test_nearby_feed(self, client, db):
        make_cafe(db, "스터디카페 모모", "서울 강남구 테헤란로 123", rating=4.5, place_url="http://momo")

        response = client.get(f"{API}/cafes/nearby", params={"lat": 37.5017, "lng": 127.0269})

        assert response.status_code == 200
        body = response.json()
        assert body["items"][0]["name"] == "스터디카페 모모"
        assert body["items"][0]["from_db"] is True
        assert body["location_label"] == "강남구 역삼동"
        assert body["show_simple_list"] is False
        assert body["used_fallback_location"] is False

    def test_geolocation_failure_uses_default_coordinate(self, client):
        response = client.get(f"{API}/cafes/nearby", params={"geo_error": "permission_denied"})

        assert response.status_code == 200
        body = response.json()
        assert body["used_fallback_location"] is True
        assert body["location_label"] == "위치 정보 없음"
        assert body["show_simple_list"] is True

    def test_live_search_failure_is_bad_gateway(self, client, kakao):
        kakao.fail_category = True
        response = client.get(f"{API}/cafes/nearby", params={"lat": 37.5017, "lng": 127.0269})
        assert response.status_code == 502


class TestAuthEndpoints:

    def test_callback_creates_user_and_caches_session(self, client, auth_client):
        response = client.post(f"{API}/auth/callback", json={"access_token": TOKEN})

        assert response.status_code == 200
        body = response.json()
        assert body["created"] is True
        assert body["user"]["platform"] == "kakao"
        assert body["user"]["email"].endswith("@social.local")

        me = client.get(f"{API}/auth/me", headers=_auth())
        assert me.status_code == 200
        assert me.json()["id"] == body["user"]["id"]
        assert auth_client.calls == 1

    def test_callback_twice_is_idempotent(self, client):
        client.post(f"{API}/auth/callback", json={"access_token": TOKEN})
        response = client.post(f"{API}/auth/callback", json={"access_token": TOKEN})
        assert response.json()["created"] is False
        assert response.json()["updated"] is False

    def test_invalid_token(self, client):
        response = client.post(f"{API}/auth/callback", json={"access_token": "nope"})
        assert response.status_code == 401

    def test_logout_clears_session(self, client, auth_client):
        client.post(f"{API}/auth/callback", json={"access_token": TOKEN})
        assert client.post(f"{API}/auth/logout", headers=_auth()).status_code == 204

        client.get(f"{API}/auth/me", headers=_auth())
        assert auth_client.calls == 2

    def test_me_requires_token(self, client):
        assert client.get(f"{API}/auth/me").status_code == 401

    def test_signup_disabled(self, client):
        response = client.post(
            f"{API}/auth/signup", json={"email": "a@b.c", "password": "pw", "nickname": "n"}
        )
        assert response.status_code == 403

    def test_login_redirect(self, client, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", "https://jakca.supabase.co")
        response = client.get(f"{API}/auth/login/google", follow_redirects=False)
        assert response.status_code == 302
        assert "provider=google" in response.headers["location"]

    def test_login_unknown_provider(self, client, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", "https://jakca.supabase.co")
        assert client.get(f"{API}/auth/login/naver", follow_redirects=False).status_code == 400


class TestReviewAndLikeFlow:

    def _review(self, rating):
        return {
            "cafe_name": "Test Cafe",
            "cafe_address": "123 Main St",
            "latitude": 37.5017,
            "longitude": 127.0269,
            "rating": rating,
            "comment": "콘센트가 많아요",
            "features": {"outlets": "있음", "wifi": "없음"},
        }

    def test_review_requires_login(self, client):
        assert client.post(f"{API}/reviews", json=self._review(5)).status_code == 401

    def test_review_then_like(self, client):
        first = client.post(f"{API}/reviews", json=self._review(5), headers=_auth())
        second = client.post(f"{API}/reviews", json=self._review(3), headers=_auth())

        assert first.status_code == 201
        assert first.json()["cafe_created"] is True
        assert second.json()["cafe_created"] is False
        cafe_id = second.json()["cafe_id"]
        assert second.json()["cafe_rating"] == pytest.approx(4.0)

        detail = client.get(f"{API}/cafes/{cafe_id}").json()
        assert detail["review_count"] == 2
        assert len(detail["reviews"]) == 2
        assert detail["features"]["outlets"] == "many"

        assert client.post(f"{API}/cafes/{cafe_id}/likes", headers=_auth()).status_code == 201
        assert client.post(f"{API}/cafes/{cafe_id}/likes", headers=_auth()).status_code == 200
        summary = client.get(f"{API}/cafes/{cafe_id}/likes", headers=_auth()).json()
        assert summary["count"] == 1
        assert summary["status"]["is_liked"] is True

        liked = client.get(f"{API}/likes/me", headers=_auth()).json()
        assert [c["id"] for c in liked] == [cafe_id]

        mine = client.get(f"{API}/reviews/me", headers=_auth()).json()
        assert len(mine) == 2
        assert client.delete(f"{API}/reviews/{mine[0]['id']}", headers=_auth()).status_code == 204
        assert client.get(f"{API}/cafes/{cafe_id}").json()["review_count"] == 1

        assert client.delete(f"{API}/cafes/{cafe_id}/likes", headers=_auth()).status_code == 204
        assert client.get(f"{API}/cafes/{cafe_id}/likes").json() == {
            "cafe_id": cafe_id,
            "count": 0,
            "status": None,
        }

    def test_unknown_cafe(self, client):
        assert client.get(f"{API}/cafes/missing").status_code == 404
        assert client.post(f"{API}/cafes/kakao-1/likes", headers=_auth()).status_code == 404


class TestMiscEndpoints:

    def test_banner(self, client):
        body = client.get(f"{API}/banners/feed").json()
        assert body["slot"] == "feed"
        assert body["provider"] == "promo"

    def test_location(self, client):
        body = client.get(f"{API}/location", params={"lat": 37.5, "lng": 127.0}).json()
        assert body == {"latitude": 37.5, "longitude": 127.0, "label": "강남구 역삼동", "used_fallback": False}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get(f"{API}/health").json() == {"status": "healthy"}
