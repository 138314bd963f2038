# bookreview/core/exceptions.py
"""
Application exception hierarchy.

Services raise these typed outcomes; the handlers registered in
``exception_handler`` translate them into client-facing JSON responses.
"""

from typing import Any, Dict, Optional

from fastapi import status


class BookReviewException(Exception):
    """Base class for every expected, typed failure in the application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    default_detail: str = "An unexpected error occurred."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        resource_type: Optional[str] = None,
        resource_id: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.headers = headers
        self.detail = detail or self._build_detail()
        super().__init__(self.detail)

    def _build_detail(self) -> str:
        return self.default_detail

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.error_code, "message": self.detail}


class ValidationError(BookReviewException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_detail = "The request contains invalid data."


class ResourceNotFound(BookReviewException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_detail = "The requested resource was not found."

    def _build_detail(self) -> str:
        if self.resource_type and self.resource_id is not None:
            return f"{self.resource_type} with id {self.resource_id} not found."
        if self.resource_type:
            return f"{self.resource_type} not found."
        return self.default_detail


class ResourceAlreadyExists(BookReviewException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_detail = "The resource already exists."

    def _build_detail(self) -> str:
        if self.resource_type:
            return f"{self.resource_type} already exists."
        return self.default_detail


class NotAuthorized(BookReviewException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "You are not authorized to perform this action."


class InvalidToken(BookReviewException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "INVALID_TOKEN"
    default_detail = "Could not validate credentials."

    def __init__(self, detail: Optional[str] = None, **kwargs: Any):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(detail, **kwargs)


class InternalServerError(BookReviewException):
    """Raised when a collaborator (usually the database) fails unexpectedly."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_ERROR"
    default_detail = "An unexpected error occurred."


__all__ = [
    "BookReviewException",
    "ValidationError",
    "ResourceNotFound",
    "ResourceAlreadyExists",
    "NotAuthorized",
    "InvalidToken",
    "InternalServerError",
]
