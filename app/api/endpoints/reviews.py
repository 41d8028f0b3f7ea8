"""Review endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.exceptions import NotFoundError, ReviewSubmissionError
from app.db.session import get_db
from app.schemas.review import ReviewCreate, SubmittedReview, UserReview
from app.schemas.user import UserOut
from app.services.kakao import KakaoLocalService, get_kakao_service
from app.services.reviews import delete_review, list_user_reviews, submit_review

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=SubmittedReview, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    user: UserOut = Depends(get_current_user),
    places: KakaoLocalService = Depends(get_kakao_service),
) -> SubmittedReview:
    """Write a review; creates the cafe on its first review."""
    try:
        return await submit_review(db, payload, user, places=places)
    except ReviewSubmissionError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/me", response_model=list[UserReview])
def my_reviews(db: Session = Depends(get_db), user: UserOut = Depends(get_current_user)) -> list[UserReview]:
    return list_user_reviews(db, user.id)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_review(
    review_id: int,
    db: Session = Depends(get_db),
    user: UserOut = Depends(get_current_user),
) -> Response:
    """Delete one of my reviews."""
    try:
        delete_review(db, review_id, user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
