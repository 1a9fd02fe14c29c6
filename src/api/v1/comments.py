from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core import get_settings
from src.db.database import get_async_session
from src.api.dependencies.auth import get_current_user
from src.models.user import User
from src.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    CommentWithCardCreate,
)
from src.services.comment_service import CommentService

settings = get_settings()

router = APIRouter(tags=["comments"])


async def _create_comment(
    db: AsyncSession,
    response: Response,
    card_id: str,
    user_id: str,
    text: str,
):
    comment = await CommentService.create(db=db, card_id=card_id, user_id=user_id, text=text)
    response.headers["Location"] = f"{settings.API_PREFIX}/comments/{comment.id}"
    return comment


@router.get("/cards/{card_id}/comments", response_model=List[CommentResponse])
async def get_card_comments(
    card_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Get all comments for a card"""
    return await CommentService.get_by_card(db=db, card_id=card_id, user_id=current_user.id)


@router.post(
    "/cards/{card_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_card_comment(
    card_id: str,
    comment_create: CommentCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Create a new comment for a card"""
    return await _create_comment(db, response, card_id, current_user.id, comment_create.text)


@router.get("/comments", response_model=List[CommentResponse])
async def get_comments(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Get every comment on the boards the caller belongs to"""
    return await CommentService.get_visible_to_user(db=db, user_id=current_user.id)


@router.post("/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_create: CommentWithCardCreate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await _create_comment(
        db, response, comment_create.card_id, current_user.id, comment_create.text
    )


@router.get("/comments/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    return await CommentService.get_for_user(db=db, comment_id=comment_id, user_id=current_user.id)


@router.patch("/comments/{comment_id}", response_model=CommentResponse)
@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    comment_update: CommentUpdate,
    response: Response,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Update a comment (only the author)"""
    comment = await CommentService.update(
        db=db, comment_id=comment_id, user_id=current_user.id, text=comment_update.text
    )
    response.headers["Location"] = f"{settings.API_PREFIX}/comments/{comment.id}"
    return comment


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(get_current_user),
):
    """Delete a comment (the author, or a board owner or admin)"""
    await CommentService.delete(db=db, comment_id=comment_id, user_id=current_user.id)
