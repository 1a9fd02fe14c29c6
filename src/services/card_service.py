from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from src.core.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from src.db.base import utcnow
from src.logs import debug_logger, log_function
from src.models.card import Card, ChecklistItem, Comment
from src.services.permission_service import PermissionService, ALL_ROLES

UPDATABLE_FIELDS = ("title", "description", "due_date", "labels", "list_id", "position")


class CardService:
    """CRUD operations service for Card model"""

    @staticmethod
    @log_function()
    async def create(
        db: AsyncSession,
        list_id: str,
        user_id: str,
        title: str,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
        labels: Optional[List[Any]] = None,
        position: Optional[int] = None
    ) -> Card:
        """Create a new card in a list, appended at the end by default"""
        if not title or not title.strip():
            raise InvalidInputError("Title is required.")

        board_list, board = await PermissionService.resolve_list(db, list_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to create cards in this list."
        )

        if position is None:
            query = select(func.count(Card.id)).where(Card.list_id == board_list.id)
            position = (await db.execute(query)).scalar() or 0
        elif position < 0:
            raise InvalidInputError("Position must be a non-negative integer.")

        now = utcnow()
        card = Card(
            list_id=board_list.id,
            title=title,
            description=description or "",
            position=position,
            due_date=due_date,
            labels=list(labels or []),
            attachments=[],
            checklist=[],
            comments=[],
            created_at=now,
            updated_at=now,
        )
        db.add(card)
        await db.commit()

        debug_logger.info(f"Создана новая карточка: ID {card.id}, в списке {board_list.id}")
        return card

    @staticmethod
    async def get_by_list(
        db: AsyncSession,
        list_id: str,
        user_id: str
    ) -> List[Card]:
        """Get all cards of a list ordered by position"""
        board_list, board = await PermissionService.resolve_list(db, list_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view cards in this list."
        )

        query = (
            select(Card)
            .where(Card.list_id == board_list.id)
            .order_by(Card.position, Card.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_for_user(
        db: AsyncSession,
        card_id: str,
        user_id: str
    ) -> Card:
        card, _, board = await PermissionService.resolve_card(db, card_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view this card."
        )
        return card

    @staticmethod
    async def get_in_list(
        db: AsyncSession,
        list_id: str,
        card_id: str,
        user_id: str
    ) -> Card:
        """Get a card addressed through its list"""
        board_list, board = await PermissionService.resolve_list(db, list_id)

        card = await db.get(Card, card_id)
        if card is None or card.list_id != board_list.id:
            raise NotFoundError("Card not found in this list.")

        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to view this card."
        )
        return card

    @staticmethod
    async def require_in_list(
        db: AsyncSession,
        list_id: str,
        card_id: Optional[str]
    ) -> Card:
        """Check that a card given by id in a request body sits in the addressed list"""
        if not card_id:
            raise InvalidInputError("Card ID is required.")

        card = await db.get(Card, card_id)
        if card is None:
            raise NotFoundError("Card not found.")
        if card.list_id != list_id:
            raise InvalidInputError("Card does not belong to the specified list.")
        return card

    @staticmethod
    @log_function()
    async def update(
        db: AsyncSession,
        card_id: str,
        user_id: str,
        changes: Dict[str, Any]
    ) -> Card:
        """Apply a partial update; fields absent from ``changes`` keep their value.

        A new ``list_id`` moves the card, but only to a list on the same board.
        All checks run before anything is written.
        """
        card, current_list, board = await PermissionService.resolve_card(db, card_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to update this card."
        )

        changes = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}

        if "title" in changes and (not changes["title"] or not changes["title"].strip()):
            raise InvalidInputError("Title cannot be empty.")

        position = changes.get("position")
        if position is not None and position < 0:
            raise InvalidInputError("Position must be a non-negative integer.")

        target_list_id = changes.get("list_id")
        if target_list_id is not None and target_list_id != current_list.id:
            try:
                _, target_board = await PermissionService.resolve_list(db, target_list_id)
            except NotFoundError:
                raise NotFoundError("Target list not found.")
            if target_board.id != board.id:
                debug_logger.warning(
                    f"Попытка переместить карточку {card_id} на другую доску {target_board.id}"
                )
                raise ForbiddenError("Cannot move card to a different board.")
            card.list_id = target_list_id

        if changes.get("title") is not None:
            card.title = changes["title"]
        if "description" in changes:
            card.description = changes["description"] or ""
        if "due_date" in changes:
            card.due_date = changes["due_date"]
        if "labels" in changes:
            card.labels = list(changes["labels"] or [])
        if position is not None:
            card.position = position

        card.updated_at = utcnow()
        await db.commit()
        return card

    @staticmethod
    @log_function()
    async def delete(
        db: AsyncSession,
        card_id: str,
        user_id: str
    ) -> None:
        """Delete a card together with its comments and checklist items"""
        card, _, board = await PermissionService.resolve_card(db, card_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to delete this card."
        )

        await db.execute(delete(Comment).where(Comment.card_id == card.id))
        await db.execute(delete(ChecklistItem).where(ChecklistItem.card_id == card.id))
        await db.execute(delete(Card).where(Card.id == card.id))
        await db.commit()
