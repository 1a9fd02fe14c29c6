from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core import get_settings
from src.db.database import get_async_session
from src.api.dependencies.auth import get_current_user
from src.models.user import User
from src.schemas.card import (
    CardCreate,
    CardResponse,
    CardUpdate,
    ChecklistItemCreate,
    ChecklistItemResponse,
    ChecklistItemUpdate,
    ListCardDelete,
    ListCardUpdate,
)
from src.services.card_service import CardService
from src.services.checklist_service import ChecklistService

settings = get_settings()

# Cards addressed through their list
list_cards_router = APIRouter(
    prefix="/lists/{list_id}/cards",
    tags=["cards"],
)

router = APIRouter(
    prefix="/cards",
    tags=["cards"],
)


@list_cards_router.get("", response_model=List[CardResponse])
async def get_list_cards(
    list_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Get all cards of a list ordered by position"""
    return await CardService.get_by_list(db=db, list_id=list_id, user_id=current_user.id)


@list_cards_router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    list_id: str,
    card_create: CardCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Create a new card in a list"""
    card = await CardService.create(
        db=db,
        list_id=list_id,
        user_id=current_user.id,
        title=card_create.title,
        description=card_create.description,
        due_date=card_create.due_date,
        labels=card_create.labels,
        position=card_create.position,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/cards/{card.id}"
    return card


@list_cards_router.get("/{card_id}", response_model=CardResponse)
async def get_list_card(
    list_id: str,
    card_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await CardService.get_in_list(
        db=db, list_id=list_id, card_id=card_id, user_id=current_user.id
    )


@list_cards_router.put("", response_model=CardResponse)
async def update_list_card(
    list_id: str,
    card_update: ListCardUpdate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Update a card of this list; the card id is sent in the body and moves are not allowed"""
    card = await CardService.require_in_list(db, list_id, card_update.id)
    card = await CardService.update(
        db=db,
        card_id=card.id,
        user_id=current_user.id,
        changes=card_update.model_dump(exclude_unset=True, exclude={"id", "list_id"}),
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/lists/{list_id}/cards/{card.id}"
    return card


@list_cards_router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list_card(
    list_id: str,
    card_delete: ListCardDelete,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    card = await CardService.require_in_list(db, list_id, card_delete.id)
    await CardService.delete(db=db, card_id=card.id, user_id=current_user.id)


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Get a card with its checklist and comments"""
    return await CardService.get_for_user(db=db, card_id=card_id, user_id=current_user.id)


@router.put("/{card_id}", response_model=CardResponse)
async def update_card(
    card_id: str,
    card_update: CardUpdate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """
    Update a card; only the fields sent are changed.
    Sending `listId` moves the card to another list of the same board.
    """
    card = await CardService.update(
        db=db,
        card_id=card_id,
        user_id=current_user.id,
        changes=card_update.model_dump(exclude_unset=True),
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/cards/{card.id}"
    return card


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(
    card_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    await CardService.delete(db=db, card_id=card_id, user_id=current_user.id)


@router.post(
    "/{card_id}/checklist",
    response_model=ChecklistItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_checklist_item(
    card_id: str,
    item_create: ChecklistItemCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Append an unchecked item to the card's checklist"""
    item = await ChecklistService.add_item(
        db=db, card_id=card_id, user_id=current_user.id, text=item_create.text
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/cards/{card_id}/checklist/{item.id}"
    return item


@router.patch("/{card_id}/checklist/{item_id}", response_model=CardResponse)
async def toggle_checklist_item(
    card_id: str,
    item_id: str,
    item_update: ChecklistItemUpdate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Mark a checklist item as done or not done and return the whole card"""
    card = await ChecklistService.set_completed(
        db=db,
        card_id=card_id,
        item_id=item_id,
        user_id=current_user.id,
        completed=item_update.completed,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/cards/{card.id}"
    return card
