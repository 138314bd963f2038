import logging
from typing import Optional, Dict, Any, List, Iterable, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession
from datetime import datetime, timezone

from bookreview.core.config import settings
from bookreview.crud.book_crud import book_repository, DUPLICATE_ISBN_MESSAGE
from bookreview.crud.review_crud import review_repository
from bookreview.crud.user_crud import user_repository
from bookreview.schemas.book_schema import (
    BookCreate,
    BookResponse,
    BookListResponse,
    BookDetailResponse,
)
from bookreview.schemas.common_schema import PaginationInfo
from bookreview.schemas.review_schema import ReviewResponse
from bookreview.schemas.user_schema import UserBasicResponse
from bookreview.models.book_model import Book

from bookreview.services.rating_service import (
    rating_service,
    RatingSummary,
    EMPTY_SUMMARY,
)
from bookreview.utils.pagination import (
    MAX_DB_INT,
    PageWindow,
    page_window,
    describe_page,
)
from bookreview.core.exception_utils import raise_for_status
from bookreview.core.exceptions import (
    ResourceNotFound,
    ValidationError,
    ResourceAlreadyExists,
)

logger = logging.getLogger(__name__)


class BookService:
    """
    Catalog reads and book creation.

    Every book leaving this service carries its creator's public identity and
    a rating summary computed from the complete review set of that book.
    """

    def __init__(self):
        """
        Repositories are plain attributes so tests can swap in fakes.
        """
        self.book_repository = book_repository
        self.review_repository = review_repository
        self.user_repository = user_repository
        self.rating_service = rating_service
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ======= PRESENTATION HELPERS =======
    async def get_identities(
        self, db: AsyncSession, *, user_ids: Iterable[int]
    ) -> Dict[int, UserBasicResponse]:
        """Public identities for ``user_ids`` fetched in one lookup."""
        users = await self.user_repository.get_by_ids(db=db, obj_ids=user_ids)
        return {user.id: UserBasicResponse.model_validate(user) for user in users}

    @staticmethod
    def _to_response(
        book: Book,
        *,
        identities: Dict[int, UserBasicResponse],
        summary: RatingSummary,
    ) -> BookResponse:
        return BookResponse(
            **book.model_dump(),
            added_by=identities.get(book.added_by_id),
            average_rating=summary.average_rating,
            review_count=summary.review_count,
        )

    async def present_books(
        self, db: AsyncSession, *, books: List[Book]
    ) -> List[BookResponse]:
        """Attach creator identity and rating summary to each book, keeping order."""
        if not books:
            return []

        summaries = await self.rating_service.aggregate_many(
            db, book_ids=[book.id for book in books]
        )
        identities = await self.get_identities(
            db, user_ids=[book.added_by_id for book in books]
        )
        return [
            self._to_response(
                book, identities=identities, summary=summaries[book.id]
            )
            for book in books
        ]

    async def paginate_books(
        self,
        db: AsyncSession,
        *,
        filters: Dict[str, Any],
        window: PageWindow,
    ) -> Tuple[List[BookResponse], PaginationInfo]:
        """One page of rated books, newest first, plus its descriptor."""
        books, total = await self.book_repository.get_many(
            db=db,
            skip=window.skip,
            limit=window.limit,
            filters=filters,
            order_by="created_at",
            order_desc=True,
        )
        rated_books = await self.present_books(db, books=books)
        return rated_books, describe_page(window.page, window.limit, total)

    # ======= READ OPERATIONS =======
    async def list_books(
        self,
        db: AsyncSession,
        *,
        author: Optional[str] = None,
        genre: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> BookListResponse:
        """
        List the catalog, optionally narrowed by author and/or genre.

        Both filters are case-insensitive substring matches and combine with AND.
        The pagination total counts every book matching the filters.
        """
        window = page_window(
            page,
            limit,
            default_limit=settings.BOOKS_PAGE_SIZE,
            max_limit=settings.BOOKS_MAX_PAGE_SIZE,
        )
        filters = {"author": author, "genre": genre}

        books, pagination = await self.paginate_books(
            db, filters=filters, window=window
        )

        self._logger.info(
            f"Book list retrieved : {len(books)} books returned",
            extra={"filters": {k: v for k, v in filters.items() if v}},
        )
        return BookListResponse(books=books, pagination=pagination)

    async def get_book_detail(
        self,
        db: AsyncSession,
        *,
        book_id: int,
        review_page: Optional[int] = None,
        review_limit: Optional[int] = None,
    ) -> BookDetailResponse:
        """
        A book with one page of its reviews.

        The rating summary always covers every review of the book, so
        ``book.review_count`` equals ``review_pagination.total_items`` however
        the review page is sized.
        """
        if not 0 < book_id <= MAX_DB_INT:
            raise ValidationError("Book ID must be a positive integer")

        book = await self.book_repository.get(db=db, obj_id=book_id)
        raise_for_status(
            condition=book is None,
            exception=ResourceNotFound,
            resource_type="Book",
            resource_id=book_id,
        )

        window = page_window(
            review_page,
            review_limit,
            default_limit=settings.REVIEWS_PAGE_SIZE,
            max_limit=settings.REVIEWS_MAX_PAGE_SIZE,
        )
        reviews, total_reviews = await self.review_repository.get_many(
            db=db,
            skip=window.skip,
            limit=window.limit,
            filters={"book_id": book_id},
            order_by="created_at",
            order_desc=True,
        )

        summary = await self.rating_service.aggregate(db, book_id=book_id)
        identities = await self.get_identities(
            db,
            user_ids=[book.added_by_id, *(review.user_id for review in reviews)],
        )

        return BookDetailResponse(
            book=self._to_response(book, identities=identities, summary=summary),
            reviews=[
                ReviewResponse(**review.model_dump(), user=identities.get(review.user_id))
                for review in reviews
            ],
            review_pagination=describe_page(window.page, window.limit, total_reviews),
        )

    # ========CREATE======
    async def create_book(
        self, db: AsyncSession, *, book_data: BookCreate, principal_id: int
    ) -> BookResponse:
        """Create a book owned by ``principal_id``."""

        if book_data.isbn:
            existing_book = await self.book_repository.get_by_isbn(
                db=db, isbn=book_data.isbn
            )
            raise_for_status(
                condition=existing_book is not None,
                exception=ResourceAlreadyExists,
                detail=DUPLICATE_ISBN_MESSAGE,
                resource_type="Book",
            )

        book_dict = book_data.model_dump()
        book_dict["added_by_id"] = principal_id
        book_dict["created_at"] = datetime.now(timezone.utc)
        book_dict["updated_at"] = book_dict["created_at"]

        new_book = await self.book_repository.create(db=db, obj_in=Book(**book_dict))

        identities = await self.get_identities(db, user_ids=[principal_id])
        self._logger.info(
            f"New book created: {new_book.id}",
            extra={"book_id": new_book.id, "added_by_id": principal_id},
        )
        return self._to_response(new_book, identities=identities, summary=EMPTY_SUMMARY)


book_service = BookService()
