import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable

from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.crud.review_crud import review_repository

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class RatingSummary:
    """Review count and mean rating of one book. Computed on read, never stored."""

    review_count: int = 0
    average_rating: float = 0.0


EMPTY_SUMMARY = RatingSummary()


def summarize_ratings(review_count: int, rating_sum: int) -> RatingSummary:
    """
    Mean rating rounded half-up to one decimal; 0 when there are no reviews.

    Uses exact decimal division so 4.25 rounds to 4.3 regardless of float
    representation.
    """
    if review_count <= 0:
        return EMPTY_SUMMARY
    mean = Decimal(rating_sum) / Decimal(review_count)
    average = float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))
    return RatingSummary(review_count=review_count, average_rating=average)


class RatingService:
    """Aggregates review ratings per book over the full review set."""

    def __init__(self):
        self.review_repository = review_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def aggregate(self, db: AsyncSession, *, book_id: int) -> RatingSummary:
        """Rating summary of a single book."""
        summaries = await self.aggregate_many(db, book_ids=[book_id])
        return summaries[book_id]

    async def aggregate_many(
        self, db: AsyncSession, *, book_ids: Iterable[int]
    ) -> Dict[int, RatingSummary]:
        """
        Rating summaries for a batch of books using one grouped query.

        Every requested id is present in the result; books without reviews
        get the zero summary.
        """
        book_ids = list(dict.fromkeys(book_ids))
        if not book_ids:
            return {}

        totals = await self.review_repository.get_rating_totals(db, book_ids=book_ids)

        summaries = {
            book_id: summarize_ratings(*totals.get(book_id, (0, 0)))
            for book_id in book_ids
        }
        self._logger.debug(
            f"Aggregated ratings for {len(book_ids)} books",
            extra={"books_with_reviews": len(totals)},
        )
        return summaries


rating_service = RatingService()
