from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core import get_settings
from src.db.database import get_async_session
from src.api.dependencies.auth import get_current_user
from src.models.user import User
from src.schemas.board_list import ListResponse
from src.schemas.card import CardResponse
from src.schemas.board import (
    BoardCreate,
    BoardResponse,
    BoardUpdate,
    BoardDetailResponse,
)
from src.services.board_service import BoardService

settings = get_settings()

router = APIRouter(
    prefix="/boards",
    tags=["boards"],
)


@router.post("", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
async def create_board(
    board_create: BoardCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Create a new board owned by the caller"""
    board = await BoardService.create(
        db=db,
        name=board_create.name,
        owner_id=current_user.id,
        background=board_create.background,
        is_template=board_create.is_template,
        is_favorite=board_create.is_favorite,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/boards/{board.id}"
    return board


@router.get("", response_model=List[BoardResponse])
async def get_boards(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Get all boards the caller is a member of"""
    return await BoardService.get_boards_by_user(db=db, user_id=current_user.id)


@router.get("/{board_id}", response_model=BoardDetailResponse)
async def get_board(
    board_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Get a board with its lists and cards (all members)"""
    board, lists, cards_by_list = await BoardService.get_complete_board(
        db=db, board_id=board_id, user_id=current_user.id
    )

    board_data = BoardResponse.model_validate(board).model_dump()
    board_data["lists"] = [
        {
            **ListResponse.model_validate(board_list).model_dump(),
            "cards": [CardResponse.model_validate(card) for card in cards_by_list[board_list.id]],
        }
        for board_list in lists
    ]
    return board_data


@router.put("/{board_id}", response_model=BoardResponse)
async def update_board(
    board_id: str,
    board_update: BoardUpdate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Update a board (only owner and admin can update)"""
    board = await BoardService.update(
        db=db,
        board_id=board_id,
        user_id=current_user.id,
        name=board_update.name,
        background=board_update.background,
        is_archived=board_update.is_archived,
        is_favorite=board_update.is_favorite,
        is_template=board_update.is_template,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/boards/{board.id}"
    return board


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(
    board_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Delete a board with all its lists, cards and comments (owner only)"""
    await BoardService.delete(db=db, board_id=board_id, user_id=current_user.id)
