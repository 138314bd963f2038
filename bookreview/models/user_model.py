from sqlmodel import SQLModel, Field, Column, String, DateTime
from sqlalchemy import func
from datetime import datetime
from typing import Optional


class UserBase(SQLModel):
    username: str = Field(
        min_length=3,
        max_length=25,
        description="User's unique username",
        schema_extra={"example": "jane_doe_123"},
    )


class User(UserBase, table=True):
    """
    A principal known to the catalog.

    Credentials live with the authentication subsystem; this table only holds
    the public identity attached to books and reviews.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None, primary_key=True, description="Unique Identifier"
    )
    username: str = Field(
        sa_column=Column(String(25), nullable=False, index=True, unique=True)
    )
    created_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Account creation timestamp",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
