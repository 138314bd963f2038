# bookreview/models/book_model.py
"""
Book model definition.

Average rating and review count are not columns; they are
computed from the reviews table on every read.
"""

from sqlmodel import SQLModel, Field, Column, DateTime, String, Text
from sqlalchemy import func
from typing import Optional
from datetime import datetime
from sqlalchemy import Index, UniqueConstraint


class BookBase(SQLModel):

    title: str = Field(
        min_length=1,
        max_length=200,
        description="The title of the book",
        schema_extra={"example": "The Great Gatsby"},
    )
    author: str = Field(
        min_length=1,
        max_length=100,
        description="The author of the book",
        schema_extra={"example": "F. Scott Fitzgerald"},
    )
    genre: str = Field(
        min_length=1,
        max_length=50,
        description="The genre of the book",
        schema_extra={"example": "Classic"},
    )
    published_year: Optional[int] = Field(
        default=None,
        ge=1000,
        description="The year the book was published",
        schema_extra={"example": 1925},
    )


class Book(BookBase, table=True):
    __tablename__ = "books"
    __table_args__ = (
        UniqueConstraint("isbn", name="uq_book_isbn"),
        Index("idx_book_author_genre", "author", "genre"),
        Index("idx_book_created_at", "created_at"),
        Index("idx_book_added_by_id", "added_by_id"),
    )

    id: Optional[int] = Field(
        default=None, primary_key=True, description="A unique constraint for Book"
    )

    description: Optional[str] = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )

    # NULLs never collide under uq_book_isbn, which gives sparse uniqueness.
    isbn: Optional[str] = Field(
        default=None,
        sa_column=Column(String(20), nullable=True),
    )

    added_by_id: int = Field(
        foreign_key="users.id",
        nullable=False,
        description="Id of the User who added this Book.",
    )

    created_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Book creation timestamp",
    )
    updated_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        ),
        description="Book last updated timestamp",
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', author='{self.author}')>"
