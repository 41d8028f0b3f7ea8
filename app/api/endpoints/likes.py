"""Like endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user
from app.core.exceptions import NotFoundError
from app.db.session import get_db
from app.schemas.like import LikedCafe, LikeOut, LikeSummary
from app.schemas.user import UserOut
from app.services import likes as like_service

router = APIRouter(tags=["likes"])


@router.get("/cafes/{cafe_id}/likes", response_model=LikeSummary)
def like_summary(
    cafe_id: str,
    db: Session = Depends(get_db),
    user: UserOut | None = Depends(get_optional_user),
) -> LikeSummary:
    """Like count, plus my like status when signed in."""
    status_ = like_service.get_like_status(db, user.id, cafe_id) if user else None
    return LikeSummary(cafe_id=cafe_id, count=like_service.like_count(db, cafe_id), status=status_)


@router.post("/cafes/{cafe_id}/likes", response_model=LikeOut)
def like_cafe(
    cafe_id: str,
    response: Response,
    db: Session = Depends(get_db),
    user: UserOut = Depends(get_current_user),
) -> LikeOut:
    try:
        like, created = like_service.add_like(db, user.id, cafe_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return LikeOut.model_validate(like)


@router.delete("/cafes/{cafe_id}/likes", status_code=status.HTTP_204_NO_CONTENT)
def unlike_cafe(
    cafe_id: str,
    db: Session = Depends(get_db),
    user: UserOut = Depends(get_current_user),
) -> Response:
    like_service.remove_like(db, user.id, cafe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/likes/me", response_model=list[LikedCafe])
def my_liked_cafes(db: Session = Depends(get_db), user: UserOut = Depends(get_current_user)) -> list[LikedCafe]:
    return like_service.list_liked_cafes(db, user.id)
