import functools
import logging
from typing import Any, Callable, Optional, Type

from bookreview.core.exceptions import BookReviewException, InternalServerError

logger = logging.getLogger(__name__)


def raise_for_status(
    condition: bool,
    exception: Type[BookReviewException],
    detail: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Any = None,
) -> None:
    """Raise ``exception`` when ``condition`` holds."""
    if condition:
        raise exception(detail, resource_type=resource_type, resource_id=resource_id)


def handle_exceptions(
    default_exception: Type[BookReviewException] = InternalServerError,
    message: Optional[str] = None,
) -> Callable:
    """
    Decorator for async repository methods.

    Application exceptions pass through untouched. Anything else is logged with
    its traceback and re-raised as ``default_exception`` carrying only the
    generic ``message``, so store internals never reach the client.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except BookReviewException:
                raise
            except Exception as e:
                logger.error(
                    f"Unhandled error in {func.__qualname__}",
                    exc_info=True,
                    extra={"error_type": type(e).__name__},
                )
                raise default_exception(detail=message) from e

        return wrapper

    return decorator
