# backend/app/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The bearer token carries the user id; the user row is loaded with the
request-scoped session so tests can override ``get_db``.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user as auth_get_current_user
from ...core.enums import UserType
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


async def get_current_user(
    user_id: str = Depends(auth_get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated, active user.

    Raises:
        HTTPException: 401 if the user does not exist or is inactive
    """
    user_repo = RepositoryFactory.create_user_repository(db)
    user = await asyncio.to_thread(user_repo.get_active, user_id)
    if user is None:
        logger.warning(f"Token subject {user_id} does not match an active user")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_user_type(*user_types: UserType) -> Callable[..., Awaitable[User]]:
    """Dependency factory restricting a route to the given user types."""
    allowed = {t.value for t in user_types}

    async def verify_user_type(current_user: User = Depends(get_current_user)) -> User:
        if current_user.user_type not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "message": "You do not have access to this resource",
                    "code": "FORBIDDEN",
                    "details": {"allowed_user_types": sorted(allowed)},
                },
            )
        return current_user

    return verify_user_type


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency that ensures the caller has administrator privileges."""

    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
