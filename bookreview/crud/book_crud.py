import logging
from typing import Optional, List, Dict, Any, Tuple

from bookreview.models.book_model import Book

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select, func, and_, or_

from bookreview.crud.base import BaseRepository, contains_literal, violates_unique
from bookreview.core.exception_utils import handle_exceptions
from bookreview.core.exceptions import InternalServerError, ResourceAlreadyExists


logger = logging.getLogger(__name__)

DUPLICATE_ISBN_MESSAGE = "A book with this ISBN already exists"


class BookRepository(BaseRepository[Book]):
    """Repository for all database operations related to the Book model."""

    def __init__(self):
        super().__init__(Book)

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[Book]:
        """Retrieves a book by its ID."""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_by_isbn(self, db: AsyncSession, *, isbn: str) -> Optional[Book]:
        """Retrieves a book by its exact ISBN."""
        statement = select(self.model).where(self.model.isbn == isbn)
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
        limit: int = 10,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        order_desc: bool = True,
    ) -> Tuple[List[Book], int]:
        """Retrieve one page of books plus the total number matching ``filters``."""

        query = select(self.model)

        if filters:
            query = self._apply_filters(query, filters=filters)

        # Count total
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar_one()

        # Apply ordering
        query = self._apply_ordering(query, order_by, order_desc)

        # Apply pagination
        paginated_query = query.offset(skip).limit(limit)
        result = await db.execute(paginated_query)
        books = list(result.scalars().all())

        return books, total

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create(self, db: AsyncSession, *, obj_in: Book) -> Book:
        """Persist a pre-constructed Book. A duplicate ISBN raises ResourceAlreadyExists."""
        db.add(obj_in)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if not violates_unique(e, "uq_book_isbn", "books.isbn"):
                raise
            self._logger.info(
                "Book insert rejected by unique constraint",
                extra={"isbn": obj_in.isbn},
            )
            raise ResourceAlreadyExists(detail=DUPLICATE_ISBN_MESSAGE) from e

        await db.refresh(obj_in)
        self._logger.info(f"Book created: {obj_in.id}")
        return obj_in

    def _apply_filters(self, query, *, filters: Dict[str, Any]):
        """Apply filters to a book query."""
        if not filters:
            return query

        conditions = []

        if filters.get("author"):
            conditions.append(contains_literal(self.model.author, filters["author"]))

        if filters.get("genre"):
            conditions.append(contains_literal(self.model.genre, filters["genre"]))

        if filters.get("search"):
            conditions.append(
                or_(
                    contains_literal(self.model.title, filters["search"]),
                    contains_literal(self.model.author, filters["search"]),
                )
            )

        if conditions:
            query = query.where(and_(*conditions))

        return query


book_repository = BookRepository()
