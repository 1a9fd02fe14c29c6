from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core import get_settings
from src.db.database import get_async_session
from src.schemas.auth import UserCreate, UserResponse, LoginRequest, TokenResponse
from src.schemas.base import MessageResponse
from src.services.security_service import SecurityService
from src.services.user_service import UserService
from src.api.dependencies.auth import get_bearer_token, get_current_user
from src.models.user import User
from src.logs import api_logger

settings = get_settings()

# Create router
router = APIRouter(tags=["auth"])


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@router.post("/auth/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session)
):
    """
    Register a new user
    """
    user = await UserService.create(db, user_data.username, user_data.password)
    response.headers["Location"] = f"{settings.API_PREFIX}/users/{user.id}"
    api_logger.info(f"User registered: {user.id}")
    return user


@router.post("/sessions", response_model=TokenResponse)
@router.post("/auth/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_async_session)
):
    """
    Exchange username and password for a bearer token
    """
    user = await UserService.authenticate(db, credentials.username, credentials.password)
    token = SecurityService.create_access_token(user.id)
    return {"token": token}


@router.delete("/sessions", response_model=MessageResponse)
@router.post("/auth/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    current_user: User = Depends(get_current_user)
):
    """
    Revoke the presented token
    """
    SecurityService.revoke_token(token)
    api_logger.info(f"User {current_user.id} logged out")
    return {"message": "Successfully logged out."}
