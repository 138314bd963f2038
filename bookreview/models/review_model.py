from typing import Optional
from datetime import datetime

from sqlmodel import SQLModel, Field, Column, DateTime, Text
from sqlalchemy import Index, UniqueConstraint, CheckConstraint, func


class ReviewBase(SQLModel):
    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        schema_extra={"example": 5},
    )


class Review(ReviewBase, table=True):

    __tablename__ = "reviews"
    __table_args__ = (
        # One review per user per book
        UniqueConstraint("book_id", "user_id", name="uq_review_book_user"),
        Index("idx_review_book_created_at", "book_id", "created_at"),
        Index("idx_review_user_id", "user_id"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
    )

    id: Optional[int] = Field(
        primary_key=True, default=None, description="Unique constraint for Review"
    )

    comment: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    # Foreign keys
    book_id: int = Field(
        foreign_key="books.id", nullable=False, description="ID of the reviewed book"
    )
    user_id: int = Field(
        foreign_key="users.id", nullable=False, description="ID of the reviewer"
    )

    # Timestamps
    created_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Review creation timestamp",
    )
    updated_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
        description="Last update timestamp",
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, user_id={self.user_id}, book_id={self.book_id}, rating={self.rating})>"
