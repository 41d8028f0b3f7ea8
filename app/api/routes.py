"""Root API router."""

from fastapi import APIRouter

from app.api.endpoints import auth, banners, cafes, likes, reviews

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy"}


router.include_router(cafes.router)
router.include_router(reviews.router)
router.include_router(likes.router)
router.include_router(auth.router)
router.include_router(banners.router)
