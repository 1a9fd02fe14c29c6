from pathlib import Path
from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv
import secrets

load_dotenv()


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite://")

    # Application settings
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "t")
    PROJECT_NAME: str = "Kanban Board API"
    API_PREFIX: str = os.getenv("API_PREFIX", "")

    # CORS settings
    ALLOWED_ORIGINS: list[str] = ["*"]

    # JWT Settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(30 * 24 * 60)))
    BLACKLIST_SWEEP_INTERVAL_SECONDS: int = int(os.getenv("BLACKLIST_SWEEP_INTERVAL_SECONDS", "300"))

    # Password settings
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    PASSWORD_MIN_LENGTH: int = int(os.getenv("PASSWORD_MIN_LENGTH", "6"))

    # Logging
    LOG_DIR: str = os.getenv("LOG_DIR", str(Path(__file__).parent.parent / "logs"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
