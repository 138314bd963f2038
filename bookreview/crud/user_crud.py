import logging
from typing import Optional, List, Iterable

from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select

from bookreview.crud.base import BaseRepository
from bookreview.core.exception_utils import handle_exceptions
from bookreview.core.exceptions import InternalServerError

from bookreview.models.user_model import User

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Identity lookups for the principals that own books and reviews."""

    def __init__(self):
        super().__init__(User)

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[User]:
        """Retrieves a user by their ID."""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_by_ids(
        self, db: AsyncSession, *, obj_ids: Iterable[int]
    ) -> List[User]:
        """Retrieves all users whose id is in ``obj_ids``."""
        obj_ids = list(dict.fromkeys(obj_ids))
        if not obj_ids:
            return []

        statement = select(self.model).where(self.model.id.in_(obj_ids))
        result = await db.execute(statement)
        return list(result.scalars().all())

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create(self, db: AsyncSession, *, obj_in: User) -> User:
        """Persist a pre-constructed User."""
        db.add(obj_in)
        await db.commit()
        await db.refresh(obj_in)
        self._logger.info(f"User created: {obj_in.id}")
        return obj_in


user_repository = UserRepository()
