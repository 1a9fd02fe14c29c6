from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core import get_settings
from src.db.database import get_async_session
from src.api.dependencies.auth import get_current_user
from src.models.user import User
from src.schemas.board_list import ListCreate, ListResponse, ListUpdate
from src.services.list_service import ListService

settings = get_settings()

router = APIRouter(tags=["lists"])


@router.get("/boards/{board_id}/lists", response_model=List[ListResponse])
async def get_board_lists(
    board_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Get all lists of a board ordered by position"""
    return await ListService.get_by_board(db=db, board_id=board_id, user_id=current_user.id)


@router.post(
    "/boards/{board_id}/lists",
    response_model=ListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_list(
    board_id: str,
    list_create: ListCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Create a list in a board (any member)"""
    board_list = await ListService.create(
        db=db,
        board_id=board_id,
        user_id=current_user.id,
        title=list_create.title,
        position=list_create.position,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/lists/{board_list.id}"
    return board_list


@router.get("/lists/{list_id}", response_model=ListResponse)
async def get_list(
    list_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await ListService.get_for_user(db=db, list_id=list_id, user_id=current_user.id)


@router.put("/lists/{list_id}", response_model=ListResponse)
async def update_list(
    list_id: str,
    list_update: ListUpdate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Rename or reposition a list"""
    board_list = await ListService.update(
        db=db,
        list_id=list_id,
        user_id=current_user.id,
        title=list_update.title,
        position=list_update.position,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/lists/{board_list.id}"
    return board_list


@router.delete("/lists/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list(
    list_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Delete a list with all of its cards"""
    await ListService.delete(db=db, list_id=list_id, user_id=current_user.id)
