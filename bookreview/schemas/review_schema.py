# bookreview/schemas/review_schema.py
"""
Review schemas for request/response models.

This module defines Pydantic schemas for review-related operations,
including creation, merge-patch updates, and response formats.
"""

from typing import Optional, Annotated
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from bookreview.schemas.user_schema import UserBasicResponse


Rating = Annotated[int, Field(ge=1, le=5, description="Rating from 1 to 5 stars", examples=[4])]
Comment = Annotated[
    str,
    Field(
        max_length=1000,
        description="Free text comment",
        examples=["A slow start, but the last act is superb."],
    ),
]


# ------CRUD SCHEMAS------
class ReviewCreate(BaseModel):
    """Schema for creating a review. The book comes from the URL path."""

    rating: Rating
    comment: Optional[Comment] = None


class ReviewUpdate(BaseModel):
    """
    Merge-patch update for a review.

    Only fields present in the request body are applied; use
    ``model_dump(exclude_unset=True)`` to read them. An explicit
    ``"comment": null`` clears the comment.
    """

    rating: Optional[Rating] = None
    comment: Optional[Comment] = None

    @field_validator("rating", mode="before")
    @classmethod
    def reject_null_rating(cls, v):
        if v is None:
            raise ValueError("Rating cannot be null")
        return v


# ----- Response Schemas ------
class ReviewBookResponse(BaseModel):
    """The parent book of a review, as attached to update responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Book ID")
    title: str = Field(..., description="Book title")


class ReviewResponse(BaseModel):
    """Review with its author's public identity."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Review ID")
    book_id: int = Field(..., description="Reviewed book ID")
    user_id: int = Field(..., description="Reviewer's user ID")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: Optional[str] = Field(None, description="Review comment")
    user: Optional[UserBasicResponse] = Field(None, description="Reviewer")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class ReviewDetailResponse(ReviewResponse):
    """Review with author identity and parent book title."""

    book: Optional[ReviewBookResponse] = Field(None, description="Reviewed book")


class ReviewMutationResponse(BaseModel):
    message: str = Field(..., examples=["Review added successfully"])
    review: ReviewDetailResponse


__all__ = [
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewBookResponse",
    "ReviewResponse",
    "ReviewDetailResponse",
    "ReviewMutationResponse",
]
