from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from src.core.exceptions import InvalidInputError
from src.db.base import utcnow
from src.logs import debug_logger
from src.models.board_list import BoardList
from src.models.card import Card, ChecklistItem, Comment
from src.services.permission_service import PermissionService, ALL_ROLES


class ListService:
    """CRUD operations service for BoardList model"""

    @staticmethod
    async def create(
        db: AsyncSession,
        board_id: str,
        user_id: str,
        title: str,
        position: Optional[int] = None
    ) -> BoardList:
        """Create a new list in a board, appended at the end by default"""
        if not title or not title.strip():
            raise InvalidInputError("Title is required.")

        board = await PermissionService.resolve_board(db, board_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to create lists in this board."
        )

        if position is None:
            query = select(func.count(BoardList.id)).where(BoardList.board_id == board.id)
            position = (await db.execute(query)).scalar() or 0
        elif position < 0:
            raise InvalidInputError("Position must be a non-negative integer.")

        now = utcnow()
        board_list = BoardList(
            board_id=board.id,
            title=title,
            position=position,
            created_at=now,
            updated_at=now,
        )
        db.add(board_list)
        await db.commit()
        return board_list

    @staticmethod
    async def get_by_board(
        db: AsyncSession,
        board_id: str,
        user_id: str
    ) -> List[BoardList]:
        """Get all lists of a board ordered by position"""
        board = await PermissionService.resolve_board(db, board_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view lists in this board."
        )

        query = (
            select(BoardList)
            .where(BoardList.board_id == board.id)
            .order_by(BoardList.position, BoardList.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_for_user(
        db: AsyncSession,
        list_id: str,
        user_id: str
    ) -> BoardList:
        board_list, board = await PermissionService.resolve_list(db, list_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view this list."
        )
        return board_list

    @staticmethod
    async def update(
        db: AsyncSession,
        list_id: str,
        user_id: str,
        title: Optional[str] = None,
        position: Optional[int] = None
    ) -> BoardList:
        """Update a list's title and/or position"""
        board_list, board = await PermissionService.resolve_list(db, list_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to update this list."
        )

        if title is not None:
            if not title.strip():
                raise InvalidInputError("Title cannot be empty.")
            board_list.title = title
        if position is not None:
            if position < 0:
                raise InvalidInputError("Position must be a non-negative integer.")
            board_list.position = position

        board_list.updated_at = utcnow()
        await db.commit()
        return board_list

    @staticmethod
    async def delete(
        db: AsyncSession,
        list_id: str,
        user_id: str
    ) -> None:
        """Delete a list with its cards and their comments and checklist items"""
        board_list, board = await PermissionService.resolve_list(db, list_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to delete this list."
        )

        card_ids = list((await db.execute(
            select(Card.id).where(Card.list_id == board_list.id)
        )).scalars().all())

        if card_ids:
            await db.execute(delete(Comment).where(Comment.card_id.in_(card_ids)))
            await db.execute(delete(ChecklistItem).where(ChecklistItem.card_id.in_(card_ids)))
            await db.execute(delete(Card).where(Card.id.in_(card_ids)))
        await db.execute(delete(BoardList).where(BoardList.id == board_list.id))
        await db.commit()

        debug_logger.debug(f"Список {list_id} удален вместе с {len(card_ids)} карточками")
