from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from src.core.exceptions import ForbiddenError, InvalidInputError
from src.db.base import utcnow
from src.models.board import BoardMember
from src.models.board_list import BoardList
from src.models.card import Card, Comment
from src.services.permission_service import PermissionService, ALL_ROLES, MANAGER_ROLES


def _require_text(text: str) -> str:
    if not text or not text.strip():
        raise InvalidInputError("Comment content is required.")
    return text


class CommentService:
    """CRUD operations service for Comment model"""

    @staticmethod
    async def create(
        db: AsyncSession,
        card_id: str,
        user_id: str,
        text: str
    ) -> Comment:
        """Add a comment to a card (all roles can comment)"""
        _require_text(text)

        card, _, board = await PermissionService.resolve_card(db, card_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to comment on this card."
        )

        now = utcnow()
        comment = Comment(user_id=user_id, text=text, created_at=now, updated_at=now)
        card.comments.append(comment)
        card.updated_at = now
        await db.commit()
        return comment

    @staticmethod
    async def get_by_card(
        db: AsyncSession,
        card_id: str,
        user_id: str
    ) -> List[Comment]:
        card, _, board = await PermissionService.resolve_card(db, card_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view comments on this card."
        )
        return list(card.comments)

    @staticmethod
    async def get_for_user(
        db: AsyncSession,
        comment_id: str,
        user_id: str
    ) -> Comment:
        comment, _, _, board = await PermissionService.resolve_comment(db, comment_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view this comment."
        )
        return comment

    @staticmethod
    async def get_visible_to_user(
        db: AsyncSession,
        user_id: str
    ) -> List[Comment]:
        """Every comment on a card of a board the user belongs to"""
        query = (
            select(Comment)
            .join(Card, Card.id == Comment.card_id)
            .join(BoardList, BoardList.id == Card.list_id)
            .join(BoardMember, BoardMember.board_id == BoardList.board_id)
            .where(BoardMember.user_id == user_id)
            .order_by(Comment.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update(
        db: AsyncSession,
        comment_id: str,
        user_id: str,
        text: str
    ) -> Comment:
        """Update a comment (only the author, while still a board member)"""
        _require_text(text)

        comment, _, _, board = await PermissionService.resolve_comment(db, comment_id)
        if comment.user_id != user_id:
            raise ForbiddenError("Not authorized to update this comment.")

        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to update comments on this card."
        )

        comment.text = text
        comment.updated_at = utcnow()
        await db.commit()
        return comment

    @staticmethod
    async def delete(
        db: AsyncSession,
        comment_id: str,
        user_id: str
    ) -> None:
        """Delete a comment (author or board owner/admin)"""
        comment, card, _, board = await PermissionService.resolve_comment(db, comment_id)

        if comment.user_id != user_id:
            await PermissionService.check_board_permissions(
                db, board, user_id, MANAGER_ROLES, "Not authorized to delete this comment."
            )

        card.comments.remove(comment)
        card.updated_at = utcnow()
        await db.commit()
