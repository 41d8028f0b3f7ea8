"""Expose API endpoint routers."""

from app.api.endpoints import auth, banners, cafes, likes, reviews

__all__ = ["auth", "banners", "cafes", "likes", "reviews"]
