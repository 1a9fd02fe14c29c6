from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import uuid

from src.core import get_settings
from src.core.exceptions import InvalidTokenError, UnauthenticatedError
from src.logs import debug_logger
from src.services.token_blacklist import token_blacklist

# Get application settings
settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class SecurityService:
    """Password hashing and bearer token issue/verify/revoke"""

    @staticmethod
    def create_password_hash(password: str) -> str:
        """Create a salted bcrypt hash"""
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Невалидный хеш в базе не должен приводить к 500
            return False

    @staticmethod
    def create_access_token(
        user_id: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Issue a signed token bound to ``user_id``"""
        now = datetime.utcnow()
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + expires_delta,
            # Уникальный jti, чтобы два токена одной секунды не совпадали
            "jti": str(uuid.uuid4()),
            "type": "access",
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """Decode a token and validate signature and expiry"""
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

    @staticmethod
    def verify_token(token: Optional[str]) -> str:
        """Return the user id a valid token is bound to.

        The revocation set is consulted before the signature, so a logged-out
        token is rejected even while it is still cryptographically valid.
        """
        if not token:
            raise UnauthenticatedError("Authentication token is required.")

        if token in token_blacklist:
            raise UnauthenticatedError("Token has been invalidated. Please log in again.")

        try:
            payload = SecurityService.decode_token(token)
        except JWTError as e:
            debug_logger.debug(f"Отклонен токен: {e}")
            raise InvalidTokenError("Invalid or expired token.")

        if payload.get("type") != "access":
            raise InvalidTokenError("Invalid or expired token.")

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError("Invalid or expired token.")

        return user_id

    @staticmethod
    def get_token_expiry(token: str) -> datetime:
        """Expiry encoded in the token, read without verifying it"""
        try:
            claims = jwt.get_unverified_claims(token)
            return datetime.utcfromtimestamp(int(claims["exp"]))
        except (JWTError, KeyError, TypeError, ValueError):
            return datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    @staticmethod
    def revoke_token(token: str) -> None:
        """Add a token to the revocation set (idempotent)"""
        token_blacklist.add(token, SecurityService.get_token_expiry(token))
        debug_logger.debug(f"Токен отозван, записей в черном списке: {len(token_blacklist)}")
