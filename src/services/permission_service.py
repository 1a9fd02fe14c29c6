from typing import Iterable, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from src.core.exceptions import ForbiddenError, NotFoundError
from src.models.board import Board, BoardMember, BoardUserRole
from src.models.board_list import BoardList
from src.models.card import Card, ChecklistItem, Comment

ALL_ROLES = (BoardUserRole.OWNER, BoardUserRole.ADMIN, BoardUserRole.MEMBER)
MANAGER_ROLES = (BoardUserRole.OWNER, BoardUserRole.ADMIN)
OWNER_ONLY = (BoardUserRole.OWNER,)


class PermissionService:
    """Resolves the ownership chain of an entity and checks board membership.

    Resolution always finishes before any authorization check, so a missing
    ancestor produces ``NotFoundError`` and never ``ForbiddenError``.
    """

    @staticmethod
    async def get_user_role(
        db: AsyncSession,
        board_id: str,
        user_id: str
    ) -> Optional[BoardUserRole]:
        """Get a user's role on a board, None if not a member"""
        query = select(BoardMember.role).where(
            BoardMember.board_id == board_id,
            BoardMember.user_id == user_id
        )
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def check_board_permissions(
        db: AsyncSession,
        board: Board,
        user_id: str,
        required_roles: Iterable[BoardUserRole] = ALL_ROLES,
        message: Optional[str] = None
    ) -> BoardUserRole:
        """Return the user's role on the board or raise ForbiddenError"""
        user_role = await PermissionService.get_user_role(db, board.id, user_id)

        if user_role is None:
            raise ForbiddenError(message or "You don't have access to this board")

        if user_role not in tuple(required_roles):
            raise ForbiddenError(
                message or f"Operation not allowed with your role: {user_role.value}"
            )

        return user_role

    @staticmethod
    async def resolve_board(db: AsyncSession, board_id: str) -> Board:
        board = await db.get(Board, board_id)
        if board is None:
            raise NotFoundError("Board not found.")
        return board

    @staticmethod
    async def resolve_list(db: AsyncSession, list_id: str) -> Tuple[BoardList, Board]:
        board_list = await db.get(BoardList, list_id)
        if board_list is None:
            raise NotFoundError("List not found.")
        board = await PermissionService.resolve_board(db, board_list.board_id)
        return board_list, board

    @staticmethod
    async def resolve_card(db: AsyncSession, card_id: str) -> Tuple[Card, BoardList, Board]:
        card = await db.get(Card, card_id)
        if card is None:
            raise NotFoundError("Card not found.")
        board_list, board = await PermissionService.resolve_list(db, card.list_id)
        return card, board_list, board

    @staticmethod
    async def resolve_comment(
        db: AsyncSession,
        comment_id: str
    ) -> Tuple[Comment, Card, BoardList, Board]:
        comment = await db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found.")
        card, board_list, board = await PermissionService.resolve_card(db, comment.card_id)
        return comment, card, board_list, board

    @staticmethod
    async def resolve_checklist_item(
        db: AsyncSession,
        card: Card,
        item_id: str
    ) -> ChecklistItem:
        item = await db.get(ChecklistItem, item_id)
        if item is None or item.card_id != card.id:
            raise NotFoundError("Checklist item not found.")
        return item
