from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, JSON
from sqlalchemy.orm import relationship

from src.db.base import Base, generate_id, utcnow, ID_WIDTH


class Card(Base):
    """Модель карточки для канбан-системы"""

    __tablename__ = "cards"

    id = Column(String(ID_WIDTH), primary_key=True, default=generate_id)
    list_id = Column(String(ID_WIDTH), ForeignKey("lists.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    position = Column(Integer, default=0, nullable=False)  # Для сортировки карточек внутри списка
    due_date = Column(DateTime, nullable=True)
    labels = Column(JSON, nullable=False, default=list)
    attachments = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    checklist = relationship(
        "ChecklistItem",
        back_populates="card",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ChecklistItem.id",
    )
    comments = relationship(
        "Comment",
        back_populates="card",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Comment.id",
    )


class ChecklistItem(Base):
    """Пункт чек-листа карточки"""

    __tablename__ = "checklist_items"

    id = Column(String(ID_WIDTH), primary_key=True, default=generate_id)
    card_id = Column(String(ID_WIDTH), ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    card = relationship("Card", back_populates="checklist")


class Comment(Base):
    """Модель комментария к карточке"""

    __tablename__ = "comments"

    id = Column(String(ID_WIDTH), primary_key=True, default=generate_id)
    card_id = Column(String(ID_WIDTH), ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(ID_WIDTH), nullable=False, index=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    card = relationship("Card", back_populates="comments")
