"""FastAPI application entry point."""

from dotenv import load_dotenv

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from app import models  # noqa: F401
from app.api.routes import router
from app.core.config import settings
from app.core.logging import configure_logging
from app.db.init_db import init_db
from app.services.auth import SessionCache
from app.services.memo import TTLMemo

configure_logging()

app = FastAPI(title=settings.project_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router, prefix=settings.api_v1_prefix)

# 프로세스 단위 캐시: 로그인 세션, 카카오 카테고리 검색 결과 (5분)
app.state.session_cache = SessionCache(settings.session_cache_ttl_seconds)
app.state.live_search_memo = TTLMemo(settings.live_search_cache_ttl_seconds)


@app.on_event("startup")
def on_startup() -> None:
    """Initialize database artifacts."""
    init_db()


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Basic sanity endpoint."""
    return {"message": "JAKCA API is running"}


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Health check endpoint for Docker."""
    return {"status": "healthy"}
