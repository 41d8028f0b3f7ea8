"""Social login endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.api.deps import bearer_scheme, get_current_user, get_session_cache
from app.core.exceptions import AuthenticationError, UpstreamError
from app.db.session import get_db
from app.schemas.user import AuthCallbackRequest, AuthCallbackResponse, SignUpRequest, UserOut
from app.services.auth import (
    SIGNUP_DISABLED_MESSAGE,
    SessionCache,
    SupabaseAuthClient,
    build_sign_in_url,
    get_auth_client,
    reconcile_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/login/{provider}")
def login(provider: str, redirect_to: str | None = None) -> RedirectResponse:
    """Redirect to the provider's sign-in page."""
    try:
        url = build_sign_in_url(provider, redirect_to)
    except AuthenticationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.post("/callback", response_model=AuthCallbackResponse)
async def auth_callback(
    payload: AuthCallbackRequest,
    db: Session = Depends(get_db),
    cache: SessionCache = Depends(get_session_cache),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> AuthCallbackResponse:
    """Resolve the provider session into a local user."""
    try:
        identity = await auth_client.get_user(payload.access_token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except UpstreamError as exc:
        logger.exception("Auth callback failed")
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    user, created, updated = reconcile_user(db, identity)
    user_out = UserOut.model_validate(user)
    cache.remember(payload.access_token, user_out)
    return AuthCallbackResponse(user=user_out, created=created, updated=updated)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    cache: SessionCache = Depends(get_session_cache),
) -> None:
    if credentials is not None:
        cache.forget(credentials.credentials)


@router.get("/me", response_model=UserOut)
def me(user: UserOut = Depends(get_current_user)) -> UserOut:
    return user


@router.post("/signup", status_code=status.HTTP_403_FORBIDDEN)
def signup(payload: SignUpRequest) -> None:
    # 이메일/비밀번호 회원가입은 비활성화 상태
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SIGNUP_DISABLED_MESSAGE)
