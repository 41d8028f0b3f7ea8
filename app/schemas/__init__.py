"""Expose schemas for easier import."""

from app.schemas.banner import BannerSlot, LocationLabel  # noqa: F401
from app.schemas.cafe import CafeCard, CafeDetail, CafeFeed, CafeSource  # noqa: F401
from app.schemas.features import CafeFeatures  # noqa: F401
from app.schemas.like import LikedCafe, LikeOut, LikeStatus, LikeSummary  # noqa: F401
from app.schemas.place import PlaceResult  # noqa: F401
from app.schemas.review import (  # noqa: F401
    ReviewCreate,
    ReviewOut,
    SubmittedReview,
    UserReview,
)
from app.schemas.user import AuthCallbackRequest, AuthCallbackResponse, AuthIdentity, UserOut  # noqa: F401
