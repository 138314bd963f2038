# bookreview/schemas/book_schema.py
"""
Book schemas for request/response models.

This module defines Pydantic schemas for book-related operations:
creation, the rated book representation, and the list, detail and
search envelopes.
"""
from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator

from bookreview.schemas.common_schema import PaginationInfo
from bookreview.schemas.review_schema import ReviewResponse
from bookreview.schemas.user_schema import UserBasicResponse


class BookBase(BaseModel):
    """Base schema for book data."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="The title of the book",
        examples=["The Great Gatsby"],
    )
    author: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="The author of the book",
        examples=["F. Scott Fitzgerald"],
    )
    genre: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="The genre of the book",
        examples=["Classic"],
    )
    description: Optional[str] = Field(
        None,
        max_length=1000,
        description="A short description of the book",
    )
    published_year: Optional[int] = Field(
        None,
        ge=1000,
        description="The year the book was published",
        examples=[1925],
    )
    isbn: Optional[str] = Field(
        None,
        max_length=20,
        description="ISBN, unique among books that have one",
        examples=["9780743273565"],
    )


class BookCreate(BookBase):
    """Schema for creating a new book."""

    @field_validator("title", "author", "genre", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        """Strip leading and trailing whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("isbn", mode="before")
    @classmethod
    def normalize_isbn(cls, v):
        """A blank ISBN means no ISBN."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("published_year")
    @classmethod
    def validate_published_year(cls, v: Optional[int]) -> Optional[int]:
        """Ensure the published year is not in the future."""
        if v is not None and v > date.today().year:
            raise ValueError("Published year must be a valid year")
        return v


class BookResponse(BookBase):
    """A book with its creator and its rating summary."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier for the book")
    added_by_id: int = Field(..., description="ID of the user who added the book")
    added_by: Optional[UserBasicResponse] = Field(
        None, description="User who added this book"
    )
    average_rating: float = Field(
        0.0, ge=0.0, le=5.0, description="Mean rating, one decimal, 0 without reviews"
    )
    review_count: int = Field(0, ge=0, description="Total number of reviews")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")


class BookCreatedResponse(BaseModel):
    message: str = Field(..., examples=["Book added successfully"])
    book: BookResponse


class BookListResponse(BaseModel):
    """Response schema for the paginated catalog."""

    books: List[BookResponse] = Field(..., description="One page of books")
    pagination: PaginationInfo


class BookDetailResponse(BaseModel):
    """A book with one page of its reviews."""

    book: BookResponse
    reviews: List[ReviewResponse] = Field(
        default_factory=list, description="One page of reviews, newest first"
    )
    review_pagination: PaginationInfo


class BookSearchResponse(BaseModel):
    """Search results echoing the query they answer."""

    query: str = Field(..., description="The search query as applied")
    books: List[BookResponse] = Field(..., description="One page of matching books")
    pagination: PaginationInfo


__all__ = [
    "BookBase",
    "BookCreate",
    "BookResponse",
    "BookCreatedResponse",
    "BookListResponse",
    "BookDetailResponse",
    "BookSearchResponse",
]
