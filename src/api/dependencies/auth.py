from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import UnauthenticatedError
from src.db.database import get_async_session
from src.models.user import User
from src.services.security_service import SecurityService
from src.services.user_service import UserService

# Bearer token from the Authorization header; errors are raised by us, not by the scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/sessions", auto_error=False)


async def get_bearer_token(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """Raw bearer token of the request, needed for logout"""
    if not token:
        raise UnauthenticatedError("Authentication token is required.")
    return token


# Dependency to get current user
async def get_current_user(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_async_session)
) -> User:
    """
    Get the current authenticated user from the bearer token

    Raises:
        UnauthenticatedError: no token, revoked token, or the user no longer exists
        InvalidTokenError: malformed or expired token
    """
    user_id = SecurityService.verify_token(token)

    user = await UserService.get_by_id(db, user_id)
    if user is None:
        raise UnauthenticatedError("Invalid authentication credentials")
    return user
