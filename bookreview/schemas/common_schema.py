from pydantic import BaseModel, Field


class PaginationInfo(BaseModel):
    """Pagination descriptor returned alongside every paged list."""

    current_page: int = Field(..., ge=1, description="Current page number")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    total_items: int = Field(..., ge=0, description="Total number of matching items")
    has_next: bool = Field(..., description="Whether a next page exists")
    has_prev: bool = Field(..., description="Whether a previous page exists")


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human readable confirmation")


__all__ = ["PaginationInfo", "MessageResponse"]
