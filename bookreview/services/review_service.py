import logging
from typing import Dict

from sqlmodel.ext.asyncio.session import AsyncSession
from datetime import datetime, timezone
from bookreview.crud.book_crud import book_repository
from bookreview.crud.review_crud import review_repository, DUPLICATE_REVIEW_MESSAGE
from bookreview.crud.user_crud import user_repository
from bookreview.schemas.review_schema import (
    ReviewCreate,
    ReviewUpdate,
    ReviewBookResponse,
    ReviewDetailResponse,
)
from bookreview.schemas.user_schema import UserBasicResponse
from bookreview.models.book_model import Book
from bookreview.models.review_model import Review
from bookreview.utils.pagination import MAX_DB_INT

from bookreview.core.exception_utils import raise_for_status
from bookreview.core.exceptions import (
    ResourceNotFound,
    NotAuthorized,
    ValidationError,
    ResourceAlreadyExists,
)

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Review mutations with ownership checks.

    A principal may hold at most one review per book and may only change or
    remove reviews they wrote.
    """

    def __init__(self):
        """
        Repositories are plain attributes so tests can swap in fakes.
        """
        self.review_repository = review_repository
        self.book_repository = book_repository
        self.user_repository = user_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _check_ownership(self, principal_id: int, review: Review, action: str) -> None:
        """Only the author of a review may mutate it."""
        raise_for_status(
            condition=review.user_id != principal_id,
            exception=NotAuthorized,
            detail=f"You can only {action} your own reviews.",
        )

    async def _get_review_or_404(self, db: AsyncSession, *, review_id: int) -> Review:
        if not 0 < review_id <= MAX_DB_INT:
            raise ValidationError("Review ID must be a positive integer")

        review = await self.review_repository.get(db=db, obj_id=review_id)
        raise_for_status(
            condition=review is None,
            exception=ResourceNotFound,
            resource_type="Review",
            resource_id=review_id,
        )
        return review

    async def _to_response(
        self, db: AsyncSession, *, review: Review, book: Book
    ) -> ReviewDetailResponse:
        author = await self.user_repository.get(db=db, obj_id=review.user_id)
        return ReviewDetailResponse(
            **review.model_dump(),
            user=UserBasicResponse.model_validate(author) if author else None,
            book=ReviewBookResponse.model_validate(book) if book else None,
        )

    # ========CREATE======
    async def create_review(
        self,
        db: AsyncSession,
        *,
        book_id: int,
        review_data: ReviewCreate,
        principal_id: int,
    ) -> ReviewDetailResponse:
        """Create ``principal_id``'s review of ``book_id``."""

        book = await self.book_repository.get(db=db, obj_id=book_id)
        raise_for_status(
            condition=book is None,
            exception=ResourceNotFound,
            resource_type="Book",
            resource_id=book_id,
        )

        # The unique constraint on (book_id, user_id) backs this check up
        # when two submissions race.
        existing_review = await self.review_repository.get_by_user_and_book(
            db=db, user_id=principal_id, book_id=book_id
        )
        raise_for_status(
            condition=existing_review is not None,
            exception=ResourceAlreadyExists,
            detail=DUPLICATE_REVIEW_MESSAGE,
            resource_type="Review",
        )

        review_dict = review_data.model_dump()
        review_dict["created_at"] = datetime.now(timezone.utc)
        review_dict["updated_at"] = review_dict["created_at"]
        review_dict["user_id"] = principal_id
        review_dict["book_id"] = book.id

        new_review = await self.review_repository.create(
            db=db, obj_in=Review(**review_dict)
        )
        self._logger.info(
            f"New review created: {new_review.id}",
            extra={"book_id": book.id, "user_id": principal_id},
        )

        return await self._to_response(db, review=new_review, book=book)

    # ========UPDATE======
    async def update_review(
        self,
        db: AsyncSession,
        *,
        review_id: int,
        review_data: ReviewUpdate,
        principal_id: int,
    ) -> ReviewDetailResponse:
        """Merge-patch a review: only fields present in ``review_data`` change."""

        review = await self._get_review_or_404(db, review_id=review_id)
        self._check_ownership(principal_id, review, action="update")

        update_dict = review_data.model_dump(exclude_unset=True)
        if update_dict:
            review = await self.review_repository.update(
                db=db, review=review, fields_to_update=update_dict
            )

        book = await self.book_repository.get(db=db, obj_id=review.book_id)

        self._logger.info(
            f"Review {review_id} updated by {principal_id}",
            extra={
                "updated_review_id": review_id,
                "updated_fields": list(update_dict.keys()),
            },
        )
        return await self._to_response(db, review=review, book=book)

    # ========DELETE=======
    async def delete_review(
        self, db: AsyncSession, *, review_id: int, principal_id: int
    ) -> Dict[str, str]:
        """Delete a review owned by ``principal_id``."""

        review = await self._get_review_or_404(db, review_id=review_id)
        self._check_ownership(principal_id, review, action="delete")

        await self.review_repository.delete(db=db, obj_id=review_id)

        self._logger.warning(
            f"Review {review_id} permanently deleted by {principal_id}",
            extra={"deleted_review_id": review_id, "book_id": review.book_id},
        )
        return {"message": "Review deleted successfully"}


review_service = ReviewService()
