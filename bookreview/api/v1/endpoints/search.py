import logging

from fastapi import APIRouter, Depends, status, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.core.config import settings
from bookreview.db.session import get_session
from bookreview.schemas.book_schema import BookSearchResponse
from bookreview.services.search_service import search_service
from bookreview.utils.pagination import MAX_DB_INT


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Search"],
    prefix=f"{settings.API_V1_STR}/search",
)


@router.get(
    "",
    response_model=BookSearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search books",
    description="Case-insensitive search over book titles and authors",
)
async def search_books(
    *,
    db: AsyncSession = Depends(get_session),
    q: str = Query(..., min_length=1, max_length=100, description="Search text"),
    page: int = Query(1, ge=1, le=MAX_DB_INT, description="Page number"),
    limit: int = Query(
        settings.SEARCH_PAGE_SIZE,
        ge=1,
        le=settings.SEARCH_MAX_PAGE_SIZE,
        description="Results per page",
    ),
):
    """
    Search books by title or author.

    - **q**: Text the title or author must contain (required)
    - **page**: Page number (starts from 1)
    - **limit**: Results per page (1-50)
    """
    return await search_service.search_books(db=db, query=q, page=page, limit=limit)
