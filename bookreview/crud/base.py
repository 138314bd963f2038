import logging
from typing import Optional, Any, TypeVar, Generic
from abc import ABC, abstractmethod

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Neutralize LIKE wildcards so ``term`` only ever matches as literal text."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def contains_literal(column, term: str):
    """Case-insensitive substring predicate on ``column`` treating ``term`` literally."""
    return column.ilike(f"%{escape_like(term)}%", escape=LIKE_ESCAPE)


def violates_unique(error: IntegrityError, constraint: str, *columns: str) -> bool:
    """
    True when ``error`` was raised by the unique constraint ``constraint``.

    Server databases name the constraint in the message; SQLite only lists the
    ``table.column`` pairs it covers, so those are matched too.
    """
    message = str(error.orig)
    if constraint in message:
        return True
    return bool(columns) and f"UNIQUE constraint failed: {', '.join(columns)}" in message


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository providing consistent interface for database operations."""

    def __init__(self, model: type[T]):
        self.model = model
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    @abstractmethod
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[T]:
        """Get entity by its primary key."""
        pass

    @abstractmethod
    async def create(self, db: AsyncSession, *, obj_in: Any) -> T:
        """Create a new entity."""
        pass

    def _apply_ordering(self, query, order_by: str, order_desc: bool):
        """Order by ``order_by`` with the primary key as a stable tie-break."""
        order_column = getattr(self.model, order_by, self.model.created_at)
        if order_desc:
            return query.order_by(order_column.desc(), self.model.id.desc())
        return query.order_by(order_column.asc(), self.model.id.asc())
