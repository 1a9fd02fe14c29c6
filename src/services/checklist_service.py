from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import InvalidInputError
from src.db.base import utcnow
from src.models.card import Card, ChecklistItem
from src.services.permission_service import PermissionService, ALL_ROLES


class ChecklistService:
    """Checklist items live inside a card and follow its board's membership"""

    @staticmethod
    async def add_item(
        db: AsyncSession,
        card_id: str,
        user_id: str,
        text: str
    ) -> ChecklistItem:
        if not text or not text.strip():
            raise InvalidInputError("Checklist item is required.")

        card, _, board = await PermissionService.resolve_card(db, card_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to update this card."
        )

        now = utcnow()
        item = ChecklistItem(text=text, completed=False, created_at=now)
        card.checklist.append(item)
        card.updated_at = now
        await db.commit()
        return item

    @staticmethod
    async def set_completed(
        db: AsyncSession,
        card_id: str,
        item_id: str,
        user_id: str,
        completed: bool
    ) -> Card:
        """Toggle a checklist item and return the whole card"""
        card, _, board = await PermissionService.resolve_card(db, card_id)
        await PermissionService.check_board_permissions(
            db, board, user_id, ALL_ROLES, "Not authorized to update this card."
        )

        item = await PermissionService.resolve_checklist_item(db, card, item_id)
        item.completed = completed
        card.updated_at = utcnow()
        await db.commit()
        return card
