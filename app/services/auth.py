"""Social login: Supabase Auth session lookup and local user reconciliation."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable
from urllib.parse import urlencode

import aiohttp
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, UpstreamError
from app.models.user import User
from app.schemas.user import AuthIdentity, UserOut
from app.services.identity import normalize_user_id
from app.services.memo import TTLMemo

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("google", "kakao")
DEFAULT_NICKNAME = "사용자"
PLACEHOLDER_EMAIL_DOMAIN = "social.local"
SIGNUP_DISABLED_MESSAGE = "현재는 구글/카카오 소셜 로그인으로만 회원가입이 가능합니다."


def build_sign_in_url(provider: str, redirect_to: str | None = None) -> str:
    """Supabase OAuth authorize URL for a provider."""
    if provider not in SUPPORTED_PROVIDERS:
        raise AuthenticationError(f"Unsupported provider: {provider}")
    if not settings.supabase_url:
        raise UpstreamError("SUPABASE_URL is not configured.")
    query = urlencode({"provider": provider, "redirect_to": redirect_to or settings.auth_redirect_url})
    return f"{settings.supabase_url.rstrip('/')}/auth/v1/authorize?{query}"


class SupabaseAuthClient:
    """Resolves access tokens into identities via Supabase Auth."""

    def __init__(
        self,
        base_url: str | None = None,
        anon_key: str | None = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._base_url = (base_url or settings.supabase_url or "").rstrip("/")
        self._anon_key = anon_key or settings.supabase_anon_key
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def get_user(self, access_token: str) -> AuthIdentity:
        if not self._base_url or not self._anon_key:
            raise UpstreamError("Supabase Auth is not configured.")
        headers = {"apikey": self._anon_key, "Authorization": f"Bearer {access_token}"}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(f"{self._base_url}/auth/v1/user", headers=headers) as response:
                    if response.status in (401, 403):
                        raise AuthenticationError("인증에 실패했습니다.")
                    if response.status != 200:
                        body = await response.text()
                        raise UpstreamError(f"Supabase Auth returned {response.status}: {body[:200]}")
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise UpstreamError(f"Supabase Auth request failed: {exc}") from exc
        if not isinstance(data, dict) or not data.get("id"):
            raise UpstreamError("Supabase Auth returned a malformed user")
        return AuthIdentity.model_validate(data)


def determine_platform(identity: AuthIdentity) -> str:
    provider = (identity.app_metadata or {}).get("provider")
    if provider in SUPPORTED_PROVIDERS:
        return provider
    return "social"


def _metadata_nickname(identity: AuthIdentity) -> str | None:
    metadata = identity.user_metadata or {}
    for key in ("full_name", "name", "nickname", "display_name"):
        value = metadata.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def derive_nickname(identity: AuthIdentity) -> str:
    """Nickname from provider metadata, then the email local part, then a default."""
    nickname = _metadata_nickname(identity)
    if nickname:
        return nickname
    if identity.email and identity.email.split("@")[0]:
        return identity.email.split("@")[0]
    return DEFAULT_NICKNAME


def reconcile_user(db: Session, identity: AuthIdentity) -> tuple[User, bool, bool]:
    """Create or refresh the local user for an authenticated identity.

    Returns ``(user, created, updated)``. Existing rows only take changed,
    non-empty values, so a repeat call with the same identity writes nothing.
    """
    user_id = normalize_user_id(identity.id)
    user = db.get(User, user_id)
    platform = determine_platform(identity)

    if user is None:
        user = User(
            id=user_id,
            # 카카오는 이메일을 주지 않는 경우가 있음
            email=identity.email or f"{identity.id}@{PLACEHOLDER_EMAIL_DOMAIN}",
            nickname=derive_nickname(identity),
            platform=platform,
            status="active",
        )
        try:
            db.add(user)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(user)
        logger.info("Created user %s (%s)", user_id, platform)
        return user, True, False

    changes: dict[str, Any] = {}
    if identity.email and identity.email != user.email:
        changes["email"] = identity.email
    nickname = _metadata_nickname(identity)
    if nickname and nickname != user.nickname:
        changes["nickname"] = nickname
    if platform != user.platform:
        changes["platform"] = platform

    if not changes:
        return user, False, False

    try:
        for field, value in changes.items():
            setattr(user, field, value)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("Updated user %s: %s", user_id, ", ".join(sorted(changes)))
    return user, False, True


class SessionCache:
    """Access token → user snapshot, populated on login and cleared on logout."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._memo = TTLMemo(ttl_seconds, clock=clock)

    def remember(self, token: str, user: UserOut) -> None:
        self._memo.set(token, user)

    def lookup(self, token: str) -> UserOut | None:
        return self._memo.get(token)

    def forget(self, token: str) -> None:
        self._memo.pop(token)

    def clear(self) -> None:
        self._memo.clear()


_auth_client_instance: SupabaseAuthClient | None = None


def get_auth_client() -> SupabaseAuthClient:
    """Lazy initialization of the Supabase Auth client."""
    global _auth_client_instance
    if _auth_client_instance is None:
        _auth_client_instance = SupabaseAuthClient()
    return _auth_client_instance
