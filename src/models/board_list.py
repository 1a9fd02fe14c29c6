from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from src.db.base import Base, generate_id, utcnow, ID_WIDTH


class BoardList(Base):
    """Модель списка (колонки) на доске"""

    __tablename__ = "lists"

    id = Column(String(ID_WIDTH), primary_key=True, default=generate_id)
    board_id = Column(String(ID_WIDTH), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    position = Column(Integer, default=0, nullable=False)  # Для сортировки списков на доске
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
