import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookreview.core.exceptions import BookReviewException

logger = logging.getLogger(__name__)


async def app_exception_handler(request: Request, exc: BookReviewException):
    """Translate a typed application exception into its HTTP response."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "error_code": exc.error_code},
        )
    else:
        logger.info(
            f"Request rejected: {exc.detail}",
            extra={
                "path": request.url.path,
                "error_code": exc.error_code,
                "status_code": exc.status_code,
            },
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.to_dict()},
        headers=exc.headers,
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Caller-visible validation errors for malformed query, path or body input."""
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "The request contains invalid data.",
                "errors": jsonable_encoder(exc.errors()),
            }
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.critical(
        "Unhandled exception",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all exception handlers for the FastAPI application."""
    app.add_exception_handler(BookReviewException, app_exception_handler)
    app.add_exception_handler(
        RequestValidationError, request_validation_exception_handler
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
