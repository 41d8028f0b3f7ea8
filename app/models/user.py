"""User model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String

from app.db.base import Base


class User(Base):
    """Local profile for an identity-provider account."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255))  # 카카오 로그인은 이메일이 없을 수 있음
    nickname = Column(String(100), nullable=False)
    platform = Column(String(20), nullable=False, default="social")  # web, social, google, kakao
    status = Column(String(20), nullable=False, default="active")  # active, inactive, banned
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
