from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core import get_settings
from src.db.database import get_async_session
from src.api.dependencies.auth import get_current_user
from src.models.user import User
from src.schemas.board import MemberCreate, MemberResponse, MemberUpdate
from src.services.board_service import BoardService

settings = get_settings()

router = APIRouter(
    prefix="/boards/{board_id}/members",
    tags=["board members"],
)


@router.get("", response_model=List[MemberResponse])
async def get_board_members(
    board_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """List board members with their roles"""
    return await BoardService.get_members(db=db, board_id=board_id, user_id=current_user.id)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_board_member(
    board_id: str,
    member_data: MemberCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Add a user to the board (owner only)"""
    member = await BoardService.add_member(
        db=db,
        board_id=board_id,
        actor_id=current_user.id,
        user_id=member_data.user_id,
        role=member_data.role,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/boards/{board_id}/members/{member.user_id}"
    return member


@router.patch("/{user_id}", response_model=MemberResponse)
async def change_board_member_role(
    board_id: str,
    user_id: str,
    member_update: MemberUpdate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Change a member's role (owner only)"""
    member = await BoardService.change_member_role(
        db=db,
        board_id=board_id,
        actor_id=current_user.id,
        user_id=user_id,
        role=member_update.role,
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/boards/{board_id}/members/{member.user_id}"
    return member


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_board_member(
    board_id: str,
    user_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Remove a member, or leave the board when removing yourself"""
    await BoardService.remove_member(
        db=db,
        board_id=board_id,
        actor_id=current_user.id,
        user_id=user_id,
    )
