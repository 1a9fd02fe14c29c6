from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from src.core import get_settings
from src.core.exceptions import ConflictError, InvalidInputError, NotFoundError, UnauthenticatedError
from src.db.base import utcnow
from src.logs import debug_logger
from src.models.user import User
from src.services.security_service import SecurityService

settings = get_settings()


class UserService:
    """Credential store: registration, login checks, password changes"""

    @staticmethod
    async def create(
        db: AsyncSession,
        username: str,
        password: str
    ) -> User:
        """Register a new user with a hashed password"""
        if not username or not username.strip() or not password:
            raise InvalidInputError("Username and password are required.")

        if await UserService.get_by_username(db, username) is not None:
            raise ConflictError("Username already exists.")

        now = utcnow()
        user = User(
            username=username,
            hashed_password=SecurityService.create_password_hash(password),
            created_at=now,
            updated_at=now,
        )
        db.add(user)
        await db.commit()

        debug_logger.debug(f"Зарегистрирован пользователь {user.id}")
        return user

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        user_id: str
    ) -> Optional[User]:
        """Get user by id"""
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_username(
        db: AsyncSession,
        username: str
    ) -> Optional[User]:
        """Get user by username"""
        query = select(User).where(User.username == username)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def get_all(db: AsyncSession) -> List[User]:
        query = select(User).order_by(User.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def authenticate(
        db: AsyncSession,
        username: str,
        password: str
    ) -> User:
        """Check credentials.

        Unknown user and wrong password produce the same error for the
        caller; only the debug log tells them apart.
        """
        if not username or not password:
            raise InvalidInputError("Username and password are required.")

        user = await UserService.get_by_username(db, username)
        if user is None:
            debug_logger.debug(f"Вход отклонен: пользователь '{username}' не найден")
            raise UnauthenticatedError("Invalid credentials.")

        if not SecurityService.verify_password(password, user.hashed_password):
            debug_logger.debug(f"Вход отклонен: неверный пароль для пользователя {user.id}")
            raise UnauthenticatedError("Invalid credentials.")

        return user

    @staticmethod
    def validate_password_change(current_password: str, new_password: str) -> None:
        """Body checks that come before any permission or lookup check"""
        if not current_password or not new_password:
            raise InvalidInputError("Current password and new password are required.")

        if len(new_password) < settings.PASSWORD_MIN_LENGTH:
            raise InvalidInputError(
                f"New password must be at least {settings.PASSWORD_MIN_LENGTH} characters long."
            )

    @staticmethod
    async def change_password(
        db: AsyncSession,
        user_id: str,
        current_password: str,
        new_password: str
    ) -> None:
        UserService.validate_password_change(current_password, new_password)

        user = await UserService.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found.")

        if not SecurityService.verify_password(current_password, user.hashed_password):
            raise UnauthenticatedError("Current password is incorrect.")

        user.hashed_password = SecurityService.create_password_hash(new_password)
        user.updated_at = utcnow()
        await db.commit()

    @staticmethod
    async def delete(
        db: AsyncSession,
        user_id: str
    ) -> bool:
        """Delete a user; boards, memberships and comments stay untouched"""
        result = await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
        return result.rowcount > 0
