import logging

from fastapi import APIRouter, Depends, Path, status
from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.core.config import settings
from bookreview.db.session import get_session
from bookreview.utils.deps import get_current_user
from bookreview.utils.pagination import MAX_DB_INT

from bookreview.schemas.common_schema import MessageResponse
from bookreview.schemas.review_schema import ReviewMutationResponse, ReviewUpdate
from bookreview.models.user_model import User
from bookreview.services.review_service import review_service


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Reviews"],
    prefix=f"{settings.API_V1_STR}/reviews",
)


# =======UPDATE========
@router.put(
    "/{review_id}",
    response_model=ReviewMutationResponse,
    status_code=status.HTTP_200_OK,
    summary="Update review",
    description="Update an existing review",
)
async def update_review(
    *,
    review_id: int = Path(..., le=MAX_DB_INT, description="Review ID"),
    review_data: ReviewUpdate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Update an existing review.

    Users can only update their own reviews. Fields left out of the body
    keep their current value.

    **Updatable fields:**
    - rating: New rating (1-5)
    - comment: New comment, or null to clear it"""

    updated_review = await review_service.update_review(
        db=db,
        review_id=review_id,
        review_data=review_data,
        principal_id=current_user.id,
    )
    return {"message": "Review updated successfully", "review": updated_review}


# =======DELETE========
@router.delete(
    "/{review_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete review",
    description="Delete a review",
)
async def delete_review(
    *,
    review_id: int = Path(..., le=MAX_DB_INT, description="Review ID"),
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a review.
    Users can only delete their own reviews.
    """
    return await review_service.delete_review(
        db=db, review_id=review_id, principal_id=current_user.id
    )
