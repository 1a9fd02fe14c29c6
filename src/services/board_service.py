from typing import Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from src.core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from src.logs import debug_logger, log_function
from src.models.board import Board, BoardMember, BoardUserRole
from src.models.board_list import BoardList
from src.models.card import Card, ChecklistItem, Comment
from src.models.user import User
from src.db.base import utcnow
from src.services.permission_service import (
    PermissionService,
    ALL_ROLES,
    MANAGER_ROLES,
    OWNER_ONLY,
)


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(message)
    return value


class BoardService:
    """CRUD operations service for Board model"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        name: str,
        owner_id: str,
        background: Optional[str] = None,
        is_template: bool = False,
        is_favorite: bool = False
    ) -> Board:
        """Create a new board; the creator becomes its only owner"""
        _require_text(name, "Board name is required.")

        now = utcnow()
        board = Board(
            name=name,
            background=background,
            owner_id=owner_id,
            is_template=is_template,
            is_favorite=is_favorite,
            is_archived=False,
            created_at=now,
            updated_at=now,
            members=[BoardMember(user_id=owner_id, role=BoardUserRole.OWNER, created_at=now)],
        )
        db.add(board)
        await db.commit()
        return board

    @staticmethod
    async def get_boards_by_user(
        db: AsyncSession,
        user_id: str
    ) -> List[Board]:
        """Get all boards where the user is a member"""
        query = (
            select(Board)
            .join(BoardMember, BoardMember.board_id == Board.id)
            .where(BoardMember.user_id == user_id)
            .order_by(Board.id)
        )
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    @staticmethod
    async def get_for_user(
        db: AsyncSession,
        board_id: str,
        user_id: str
    ) -> Board:
        """Get a board the user is a member of"""
        board = await PermissionService.resolve_board(db, board_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view this board."
        )
        return board

    @staticmethod
    async def get_complete_board(
        db: AsyncSession,
        board_id: str,
        user_id: str
    ) -> Tuple[Board, List[BoardList], Dict[str, List[Card]]]:
        """Get a board with its lists and the cards of every list"""
        board = await BoardService.get_for_user(db, board_id, user_id)

        lists_result = await db.execute(
            select(BoardList)
            .where(BoardList.board_id == board.id)
            .order_by(BoardList.position, BoardList.id)
        )
        lists = list(lists_result.scalars().all())

        cards_by_list: Dict[str, List[Card]] = {board_list.id: [] for board_list in lists}
        if lists:
            cards_result = await db.execute(
                select(Card)
                .where(Card.list_id.in_(list(cards_by_list)))
                .order_by(Card.position, Card.id)
            )
            for card in cards_result.scalars().all():
                cards_by_list[card.list_id].append(card)

        return board, lists, cards_by_list

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        board_id: str,
        user_id: str,
        name: Optional[str] = None,
        background: Optional[str] = None,
        is_archived: Optional[bool] = None,
        is_favorite: Optional[bool] = None,
        is_template: Optional[bool] = None
    ) -> Board:
        """Update a board's details (owner and admin only)"""
        board = await PermissionService.resolve_board(db, board_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, MANAGER_ROLES, "Not authorized to update this board."
        )

        if name is not None:
            board.name = _require_text(name, "Board name cannot be empty.")
        if background is not None:
            board.background = background
        if is_archived is not None:
            board.is_archived = is_archived
        if is_favorite is not None:
            board.is_favorite = is_favorite
        if is_template is not None:
            board.is_template = is_template

        board.updated_at = utcnow()
        await db.commit()
        return board

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        board_id: str,
        user_id: str
    ) -> None:
        """Delete a board and everything under it (owner only).

        Ids are collected top-down and rows are removed bottom-up: comments
        and checklist items, then cards, then lists, then memberships and the
        board itself.
        """
        board = await PermissionService.resolve_board(db, board_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, OWNER_ONLY, "Not authorized to delete this board."
        )

        list_ids = list((await db.execute(
            select(BoardList.id).where(BoardList.board_id == board.id)
        )).scalars().all())

        card_ids = []
        if list_ids:
            card_ids = list((await db.execute(
                select(Card.id).where(Card.list_id.in_(list_ids))
            )).scalars().all())

        if card_ids:
            await db.execute(delete(Comment).where(Comment.card_id.in_(card_ids)))
            await db.execute(delete(ChecklistItem).where(ChecklistItem.card_id.in_(card_ids)))
            await db.execute(delete(Card).where(Card.id.in_(card_ids)))
        if list_ids:
            await db.execute(delete(BoardList).where(BoardList.id.in_(list_ids)))
        await db.execute(delete(BoardMember).where(BoardMember.board_id == board.id))
        await db.execute(delete(Board).where(Board.id == board.id))
        await db.commit()

        debug_logger.info(
            f"Доска {board_id} удалена: списков {len(list_ids)}, карточек {len(card_ids)}"
        )

    @staticmethod
    async def get_members(
        db: AsyncSession,
        board_id: str,
        user_id: str
    ) -> List[BoardMember]:
        """List the members of a board (any member can view)"""
        board = await BoardService.get_for_user(db, board_id, user_id)
        return list(board.members)

    @staticmethod
    @log_function()
    async def add_member(
        db: AsyncSession,
        board_id: str,
        actor_id: str,
        user_id: str,
        role: BoardUserRole = BoardUserRole.MEMBER
    ) -> BoardMember:
        """Add a user to a board with the given role (owner only)"""
        board = await PermissionService.resolve_board(db, board_id)
        await PermissionService.check_board_permissions(
            db, board, actor_id, OWNER_ONLY, "Only the board owner can add users to the board"
        )

        if role == BoardUserRole.OWNER:
            raise InvalidInputError("A board has exactly one owner.")

        if await db.get(User, user_id) is None:
            raise NotFoundError("User not found.")

        if board.get_member(user_id) is not None:
            raise ConflictError("User is already a member of this board")

        member = BoardMember(user_id=user_id, role=role, created_at=utcnow())
        board.members.append(member)
        board.updated_at = utcnow()
        await db.commit()
        return member

    @staticmethod
    @log_function()
    async def change_member_role(
        db: AsyncSession,
        board_id: str,
        actor_id: str,
        user_id: str,
        role: BoardUserRole
    ) -> BoardMember:
        """Change a member's role (owner only); ownership is not transferable here"""
        board = await PermissionService.resolve_board(db, board_id)
        await PermissionService.check_board_permissions(
            db, board, actor_id, OWNER_ONLY, "Only the board owner can change user roles"
        )

        member = board.get_member(user_id)
        if member is None:
            raise NotFoundError("User is not a member of this board")

        if member.role == BoardUserRole.OWNER or role == BoardUserRole.OWNER:
            raise InvalidInputError("The owner role cannot be changed or granted.")

        member.role = role
        board.updated_at = utcnow()
        await db.commit()
        return member

    @staticmethod
    @log_function()
    async def remove_member(
        db: AsyncSession,
        board_id: str,
        actor_id: str,
        user_id: str
    ) -> None:
        """Remove a member; managers remove others, anyone may leave"""
        board = await PermissionService.resolve_board(db, board_id)

        if actor_id == user_id:
            actor_role = await PermissionService.check_board_permissions(db, board, actor_id, ALL_ROLES)
        else:
            actor_role = await PermissionService.check_board_permissions(
                db, board, actor_id, MANAGER_ROLES,
                "Only owners and admins can remove users from the board"
            )

        member = board.get_member(user_id)
        if member is None:
            raise NotFoundError("User is not a member of this board")

        if member.role == BoardUserRole.OWNER:
            raise InvalidInputError("The board owner cannot be removed.")

        if (
            actor_id != user_id
            and actor_role == BoardUserRole.ADMIN
            and member.role != BoardUserRole.MEMBER
        ):
            raise ForbiddenError("Admins can only remove regular members, not other admins or the owner")

        board.members.remove(member)
        board.updated_at = utcnow()
        await db.commit()
