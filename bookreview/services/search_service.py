import logging
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.core.config import settings
from bookreview.core.exceptions import ValidationError
from bookreview.schemas.book_schema import BookSearchResponse
from bookreview.services.book_service import book_service
from bookreview.utils.pagination import page_window

logger = logging.getLogger(__name__)


class SearchService:
    """Free-text lookup over book titles and authors."""

    def __init__(self):
        self.book_service = book_service
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def search_books(
        self,
        db: AsyncSession,
        *,
        query: Optional[str],
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> BookSearchResponse:
        """
        Books whose title OR author contains ``query``, case-insensitively.

        The query is matched as literal text: characters that are wildcards to
        the database are escaped before the filter is built. Results are
        ordered, rated and paginated exactly like the catalog listing.
        """
        term = (query or "").strip()
        if not term:
            raise ValidationError("Search query is required")

        window = page_window(
            page,
            limit,
            default_limit=settings.SEARCH_PAGE_SIZE,
            max_limit=settings.SEARCH_MAX_PAGE_SIZE,
        )
        books, pagination = await self.book_service.paginate_books(
            db, filters={"search": term}, window=window
        )

        self._logger.info(
            f"Search returned {len(books)} of {pagination.total_items} books",
            extra={"query": term, "page": window.page},
        )
        return BookSearchResponse(query=term, books=books, pagination=pagination)


search_service = SearchService()
