"""Shared FastAPI dependencies."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.exceptions import AuthenticationError, UpstreamError
from app.db.session import get_db
from app.schemas.user import UserOut
from app.services.auth import SessionCache, SupabaseAuthClient, get_auth_client, reconcile_user
from app.services.memo import TTLMemo

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_cache(request: Request) -> SessionCache:
    return request.app.state.session_cache


def get_live_search_memo(request: Request) -> TTLMemo:
    return request.app.state.live_search_memo


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    cache: SessionCache = Depends(get_session_cache),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> UserOut | None:
    """Resolve the bearer token to a user, or None when no token was sent."""
    if credentials is None:
        return None
    token = credentials.credentials
    cached = cache.lookup(token)
    if cached is not None:
        return cached
    try:
        identity = await auth_client.get_user(token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    user, _created, _updated = reconcile_user(db, identity)
    user_out = UserOut.model_validate(user)
    cache.remember(token, user_out)
    return user_out


async def get_current_user(user: UserOut | None = Depends(get_optional_user)) -> UserOut:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="로그인이 필요합니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
