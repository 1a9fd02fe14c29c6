from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Boolean
from sqlalchemy.orm import relationship
import enum

from src.db.base import Base, generate_id, utcnow, ID_WIDTH


# Enum для ролей пользователей на доске
class BoardUserRole(str, enum.Enum):
    OWNER = "owner"        # Создатель доски, ровно один
    ADMIN = "admin"        # Администратор
    MEMBER = "member"      # Обычный пользователь


class BoardMember(Base):
    """Участник доски с ролью"""

    __tablename__ = "board_members"

    board_id = Column(String(ID_WIDTH), ForeignKey("boards.id", ondelete="CASCADE"), primary_key=True)
    # Не внешний ключ: удаление пользователя не трогает его членство
    user_id = Column(String(ID_WIDTH), primary_key=True)
    role = Column(Enum(BoardUserRole), nullable=False, default=BoardUserRole.MEMBER)
    created_at = Column(DateTime, default=utcnow)

    board = relationship("Board", back_populates="members")


class Board(Base):
    """Модель доски для канбан-системы"""

    __tablename__ = "boards"

    id = Column(String(ID_WIDTH), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    background = Column(String, nullable=True)
    owner_id = Column(String(ID_WIDTH), nullable=False, index=True)
    is_archived = Column(Boolean, default=False, nullable=False)
    is_favorite = Column(Boolean, default=False, nullable=False)
    is_template = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    members = relationship(
        "BoardMember",
        back_populates="board",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BoardMember.created_at",
    )

    def get_member(self, user_id: str):
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None
