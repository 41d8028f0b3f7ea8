"""
Pytest configuration and fixtures for JAKCA backend tests.

Every test gets a fresh in-memory SQLite schema; external services
(Kakao Local, Supabase Auth) are replaced with in-process fakes.
"""
import os
import pathlib
import sys
from datetime import datetime

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# app.db.session builds its engine at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import models  # noqa: E402,F401
from app.core.config import Settings  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.schemas.user import AuthIdentity, UserOut  # noqa: E402
from tests.helpers import FakeKakao  # noqa: E402

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite 드라이버에서 SAVEPOINT가 동작하도록 트랜잭션을 직접 시작
@event.listens_for(test_engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """Provide a session on a freshly created schema."""
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def config():
    """Aggregation settings with every brand picked, so padding is deterministic."""
    return Settings(
        search_radius_m=1500,
        min_display_rating=3,
        featured_limit=4,
        live_search_size=15,
        franchise_brands=["스타벅스", "투썸플레이스", "할리스"],
        franchise_pick=3,
    )


@pytest.fixture
def fake_kakao():
    return FakeKakao()


@pytest.fixture
def user():
    return UserOut(
        id="11111111-2222-3333-4444-555555555555",
        email="study@example.com",
        nickname="김공부",
        platform="google",
        status="active",
        created_at=datetime(2024, 6, 15, 9, 0),
    )


@pytest.fixture
def kakao_identity():
    return AuthIdentity(
        id="9f0c6a52-2f4a-4a5e-bb1c-0d5f6e7a8b9c",
        email=None,
        user_metadata={},
        app_metadata={"provider": "kakao"},
    )
