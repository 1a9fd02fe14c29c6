from datetime import datetime

from src.schemas.base import APIModel


class UserCreate(APIModel):
    username: str
    password: str


class LoginRequest(APIModel):
    username: str
    password: str


class PasswordChange(APIModel):
    current_password: str
    new_password: str


class TokenResponse(APIModel):
    token: str
    token_type: str = "bearer"


class UserResponse(APIModel):
    id: str
    username: str
    created_at: datetime
