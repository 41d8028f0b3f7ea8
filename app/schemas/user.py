"""Schemas for users and identity-provider sessions."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class AuthIdentity(BaseModel):
    """User object returned by Supabase Auth ``/auth/v1/user``."""

    id: str
    email: Optional[str] = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    app_metadata: dict[str, Any] = Field(default_factory=dict)


class UserOut(BaseModel):
    id: str
    email: Optional[str] = None
    nickname: str
    platform: str
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthCallbackRequest(BaseModel):
    access_token: str = Field(..., min_length=1)


class AuthCallbackResponse(BaseModel):
    user: UserOut
    created: bool
    updated: bool


class SignUpRequest(BaseModel):
    email: str
    password: str
    nickname: str
