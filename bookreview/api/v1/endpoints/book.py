import logging

from typing import Optional
from fastapi import APIRouter, Depends, Path, status, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.core.config import settings
from bookreview.db.session import get_session
from bookreview.utils.deps import get_current_user
from bookreview.utils.pagination import MAX_DB_INT

from bookreview.schemas.book_schema import (
    BookCreate,
    BookCreatedResponse,
    BookListResponse,
    BookDetailResponse,
)
from bookreview.schemas.review_schema import ReviewCreate, ReviewMutationResponse
from bookreview.models.user_model import User
from bookreview.services.book_service import book_service
from bookreview.services.review_service import review_service


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Books"],
    prefix=f"{settings.API_V1_STR}/books",
)


@router.get(
    "",
    response_model=BookListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get all books",
    description="Retrieve a paginated list of books with optional author and genre filters",
)
async def get_books(
    *,
    db: AsyncSession = Depends(get_session),
    page: int = Query(1, ge=1, le=MAX_DB_INT, description="Page number"),
    limit: int = Query(
        settings.BOOKS_PAGE_SIZE,
        ge=1,
        le=settings.BOOKS_MAX_PAGE_SIZE,
        description="Books per page",
    ),
    author: Optional[str] = Query(None, max_length=100, description="Author contains"),
    genre: Optional[str] = Query(None, max_length=50, description="Genre contains"),
):
    """
    Get all books, newest first, each with its average rating and review count.

    - **page**: Page number (starts from 1)
    - **limit**: Books per page (1-100)
    - **author**: Case-insensitive substring of the author
    - **genre**: Case-insensitive substring of the genre
    """
    return await book_service.list_books(
        db=db,
        author=author.strip() if author else None,
        genre=genre.strip() if genre else None,
        page=page,
        limit=limit,
    )


@router.post(
    "",
    response_model=BookCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="Create a new book entry owned by the authenticated user",
)
async def create_book(
    *,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    book_data: BookCreate,
):
    """
    Create a new book.
    - **title**: The title of the book (required, max 200)
    - **author**: The author of the book (required, max 100)
    - **genre**: The genre of the book (required, max 50)
    - **description**: Optional description (max 1000)
    - **published_year**: Optional year between 1000 and the current year
    - **isbn**: Optional ISBN, unique across books
    """
    book = await book_service.create_book(
        db=db, book_data=book_data, principal_id=current_user.id
    )
    return {"message": "Book added successfully", "book": book}


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get book by id",
    description="Get a book with its rating summary and one page of its reviews.",
)
async def get_book_by_id(
    *,
    db: AsyncSession = Depends(get_session),
    book_id: int = Path(..., le=MAX_DB_INT, description="Book ID"),
    review_page: int = Query(1, ge=1, le=MAX_DB_INT, description="Review page number"),
    review_limit: int = Query(
        settings.REVIEWS_PAGE_SIZE,
        ge=1,
        le=settings.REVIEWS_MAX_PAGE_SIZE,
        description="Reviews per page",
    ),
):
    """Get book by its ID"""
    return await book_service.get_book_detail(
        db=db, book_id=book_id, review_page=review_page, review_limit=review_limit
    )


@router.post(
    "/{book_id}/reviews",
    response_model=ReviewMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create review for book",
    description="Create a new review for a specific book",
)
async def create_review_for_a_book(
    *,
    book_id: int = Path(..., le=MAX_DB_INT, description="Book ID"),
    review_data: ReviewCreate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Create a review for a book.

    - Users can only have one review per book
    - Rating must be between 1 and 5
    - Comment is optional (max 1000 characters)"""
    review = await review_service.create_review(
        db=db, book_id=book_id, review_data=review_data, principal_id=current_user.id
    )
    return {"message": "Review added successfully", "review": review}
