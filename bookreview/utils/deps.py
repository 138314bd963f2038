# bookreview/utils/deps.py
"""
FastAPI dependencies for authentication.
Business logic stays in the services; this module only resolves the principal.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel.ext.asyncio.session import AsyncSession

from bookreview.core.security import token_manager
from bookreview.core.exceptions import InvalidToken
from bookreview.crud.user_crud import user_repository
from bookreview.db.session import get_session
from bookreview.models.user_model import User

logger = logging.getLogger(__name__)

# Bearer tokens are issued by the authentication service
bearer_scheme = HTTPBearer(auto_error=False, description="JWT Access Token")


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Primary authentication dependency. Validates the JWT and returns the
    principal it names.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidToken(detail="Not authenticated.")

    user_id = token_manager.get_principal_id(credentials.credentials)

    user = await user_repository.get(db=db, obj_id=user_id)
    if user is None:
        logger.warning(
            "Token for unknown principal", extra={"user_id": user_id}
        )
        raise InvalidToken(detail="Could not validate credentials.")

    request.state.user = user
    return user


__all__ = ["get_current_user", "bearer_scheme"]
