from sqlalchemy import Column, String, DateTime

from src.db.base import Base, generate_id, utcnow, ID_WIDTH


class User(Base):
    """Модель пользователя"""

    __tablename__ = "users"

    id = Column(String(ID_WIDTH), primary_key=True, default=generate_id)
    username = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
