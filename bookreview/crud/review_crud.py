import logging
from typing import Optional, List, Dict, Any, Tuple, Iterable

from bookreview.models.review_model import Review

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select, func, and_, delete

from bookreview.crud.base import BaseRepository, violates_unique
from bookreview.core.exception_utils import handle_exceptions
from bookreview.core.exceptions import InternalServerError, ResourceAlreadyExists


logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this book"


class ReviewRepository(BaseRepository[Review]):
    """Repository for all database operations related to the Review model."""

    def __init__(self):
        super().__init__(Review)

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[Review]:
        """Get a review by its id"""

        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_by_user_and_book(
        self, db: AsyncSession, *, user_id: int, book_id: int
    ) -> Optional[Review]:
        """Get review by user and book (unique constraint)."""

        statement = select(self.model).where(
            and_(self.model.user_id == user_id, self.model.book_id == book_id)
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_many(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 5,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        order_desc: bool = True,
    ) -> Tuple[List[Review], int]:
        """Retrieve one page of reviews plus the total number matching ``filters``."""
        query = select(self.model)

        if filters:
            query = self._apply_filters(query, filters=filters)

        # Count total
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar_one()

        # Apply ordering
        query = self._apply_ordering(query, order_by, order_desc)

        # Apply pagination
        result = await db.execute(query.offset(skip).limit(limit))
        reviews = list(result.scalars().all())

        return reviews, total

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_rating_totals(
        self, db: AsyncSession, *, book_ids: Iterable[int]
    ) -> Dict[int, Tuple[int, int]]:
        """
        Count and sum the ratings of every review of each book in one grouped query.

        Returns ``{book_id: (review_count, rating_sum)}``; books without reviews
        are absent from the result.
        """
        book_ids = list(dict.fromkeys(book_ids))
        if not book_ids:
            return {}

        statement = (
            select(
                self.model.book_id,
                func.count(self.model.id),
                func.coalesce(func.sum(self.model.rating), 0),
            )
            .where(self.model.book_id.in_(book_ids))
            .group_by(self.model.book_id)
        )
        result = await db.execute(statement)
        return {
            book_id: (int(count), int(rating_sum))
            for book_id, count, rating_sum in result.all()
        }

    # CRUD
    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create(self, db: AsyncSession, *, obj_in: Review) -> Review:
        """Create a review. A second review for the same (book, user) raises ResourceAlreadyExists."""

        db.add(obj_in)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if not violates_unique(
                e, "uq_review_book_user", "reviews.book_id", "reviews.user_id"
            ):
                raise
            self._logger.info(
                "Review insert rejected by unique constraint",
                extra={"book_id": obj_in.book_id, "user_id": obj_in.user_id},
            )
            raise ResourceAlreadyExists(detail=DUPLICATE_REVIEW_MESSAGE) from e

        await db.refresh(obj_in)
        self._logger.info(f"Review created: {obj_in.id}")
        return obj_in

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def update(
        self, db: AsyncSession, *, review: Review, fields_to_update: Dict[str, Any]
    ) -> Review:
        """Apply ``fields_to_update`` to ``review`` and commit."""
        for field, value in fields_to_update.items():
            setattr(review, field, value)
        review.updated_at = datetime.now(timezone.utc)

        db.add(review)
        await db.commit()
        await db.refresh(review)

        self._logger.info(
            f"Review fields updated for {review.id}: {list(fields_to_update.keys())}"
        )
        return review

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def delete(self, db: AsyncSession, *, obj_id: int) -> None:
        """Delete a review"""
        statement = delete(self.model).where(self.model.id == obj_id)
        await db.execute(statement)
        await db.commit()
        self._logger.info(f"Review hard deleted: {obj_id}")

    def _apply_filters(self, query, *, filters: Dict[str, Any]):
        """Apply filters to a review query."""
        conditions = []

        if filters.get("book_id"):
            conditions.append(self.model.book_id == filters["book_id"])

        if conditions:
            query = query.where(and_(*conditions))

        return query


review_repository = ReviewRepository()
