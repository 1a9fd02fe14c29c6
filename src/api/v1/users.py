from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ForbiddenError
from src.db.database import get_async_session
from src.schemas.auth import UserResponse, PasswordChange
from src.schemas.base import MessageResponse
from src.services.security_service import SecurityService
from src.services.user_service import UserService
from src.api.dependencies.auth import get_bearer_token, get_current_user
from src.models.user import User

# Create router
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
async def get_users(
    db: AsyncSession = Depends(get_async_session),
    _: User = Depends(get_current_user)
):
    """
    Get all users (without password hashes)
    """
    return await UserService.get_all(db)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Get current user information
    """
    return current_user


@router.put("/{user_id}/password", response_model=MessageResponse)
@router.put("/{user_id}", response_model=MessageResponse)
async def change_password(
    user_id: str,
    password_data: PasswordChange,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """
    Change the caller's own password
    """
    UserService.validate_password_change(password_data.current_password, password_data.new_password)
    if current_user.id != user_id:
        raise ForbiddenError("Not authorized to update this user.")

    await UserService.change_password(
        db,
        user_id,
        current_password=password_data.current_password,
        new_password=password_data.new_password
    )
    return {"message": "Password updated successfully"}


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_user(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user)
):
    """
    Delete the caller's account; boards and comments they own are kept
    """
    await UserService.delete(db, current_user.id)
    SecurityService.revoke_token(token)
