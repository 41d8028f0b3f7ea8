"""
Tests for social-login reconciliation and the session cache
"""
from unittest.mock import patch

import pytest

from app.core.config import settings
from app.core.exceptions import AuthenticationError, UpstreamError
from app.models.user import User
from app.schemas.user import AuthIdentity, UserOut
from app.services.auth import (
    SessionCache,
    SupabaseAuthClient,
    build_sign_in_url,
    derive_nickname,
    determine_platform,
    reconcile_user,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestReconcileUser:

    def test_creates_user_without_email(self, db, kakao_identity):
        user, created, updated = reconcile_user(db, kakao_identity)

        assert created is True
        assert updated is False
        assert user.email == f"{kakao_identity.id}@social.local"
        assert user.nickname == "사용자"
        assert user.platform == "kakao"
        assert user.status == "active"

    def test_second_run_writes_nothing(self, db, kakao_identity):
        reconcile_user(db, kakao_identity)

        with patch.object(db, "commit", wraps=db.commit) as commit:
            user, created, updated = reconcile_user(db, kakao_identity)

        assert (created, updated) == (False, False)
        commit.assert_not_called()
        assert db.query(User).count() == 1

    def test_updates_only_changed_fields(self, db):
        identity = AuthIdentity(
            id="0e3b5a1c-7d2f-4c6b-9a8e-1f2d3c4b5a69",
            email="old@example.com",
            user_metadata={"full_name": "김공부"},
            app_metadata={"provider": "google"},
        )
        reconcile_user(db, identity)

        newer = identity.model_copy(update={"user_metadata": {"full_name": "김집중"}})
        user, created, updated = reconcile_user(db, newer)

        assert (created, updated) == (False, True)
        assert user.nickname == "김집중"
        assert user.email == "old@example.com"

    def test_missing_email_never_clears_existing(self, db):
        identity = AuthIdentity(
            id="0e3b5a1c-7d2f-4c6b-9a8e-1f2d3c4b5a69",
            email="keep@example.com",
            user_metadata={"name": "커피러버"},
            app_metadata={"provider": "kakao"},
        )
        reconcile_user(db, identity)

        stripped = identity.model_copy(update={"email": None, "user_metadata": {}})
        user, _created, updated = reconcile_user(db, stripped)

        assert updated is False
        assert user.email == "keep@example.com"
        assert user.nickname == "커피러버"

    def test_non_uuid_provider_id_is_normalized(self, db):
        identity = AuthIdentity(id="3141592653", app_metadata={"provider": "kakao"})

        user, created, _ = reconcile_user(db, identity)
        again, created_again, _ = reconcile_user(db, identity)

        assert created is True
        assert created_again is False
        assert user.id == again.id
        assert len(user.id) == 36


class TestProfileDerivation:

    @pytest.mark.parametrize(
        "metadata, email, expected",
        [
            ({"full_name": "A", "name": "B"}, None, "A"),
            ({"name": "B", "nickname": "C"}, None, "B"),
            ({"nickname": "C"}, None, "C"),
            ({"display_name": "D"}, None, "D"),
            ({"full_name": "  "}, "study@example.com", "study"),
            ({}, None, "사용자"),
        ],
    )
    def test_nickname_fallbacks(self, metadata, email, expected):
        identity = AuthIdentity(id="x", email=email, user_metadata=metadata)
        assert derive_nickname(identity) == expected

    @pytest.mark.parametrize(
        "provider, expected",
        [("google", "google"), ("kakao", "kakao"), ("github", "social"), (None, "social")],
    )
    def test_platform(self, provider, expected):
        app_metadata = {"provider": provider} if provider else {}
        assert determine_platform(AuthIdentity(id="x", app_metadata=app_metadata)) == expected


class TestSessionCache:

    def _user(self):
        return UserOut(
            id="u1", email=None, nickname="n", platform="kakao", status="active",
            created_at="2024-06-15T09:00:00",
        )

    def test_lifecycle(self):
        clock = FakeClock()
        cache = SessionCache(300, clock=clock)
        user = self._user()

        assert cache.lookup("token") is None
        cache.remember("token", user)
        assert cache.lookup("token") == user

        cache.forget("token")
        assert cache.lookup("token") is None

    def test_entries_expire(self):
        clock = FakeClock()
        cache = SessionCache(300, clock=clock)
        cache.remember("token", self._user())

        clock.now += 299
        assert cache.lookup("token") is not None
        clock.now += 1
        assert cache.lookup("token") is None


class TestSignInUrl:

    def test_supported_provider(self, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", "https://jakca.supabase.co/")

        url = build_sign_in_url("kakao", "https://jakca.app/auth/callback")

        assert url.startswith("https://jakca.supabase.co/auth/v1/authorize?")
        assert "provider=kakao" in url
        assert "redirect_to=https%3A%2F%2Fjakca.app%2Fauth%2Fcallback" in url

    def test_unknown_provider(self, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", "https://jakca.supabase.co")
        with pytest.raises(AuthenticationError):
            build_sign_in_url("naver")


class TestSupabaseAuthClient:

    @pytest.mark.asyncio
    async def test_unconfigured_client_raises_upstream(self):
        client = SupabaseAuthClient(base_url="", anon_key="")
        client._base_url = ""
        client._anon_key = None
        with pytest.raises(UpstreamError):
            await client.get_user("token")
