from datetime import datetime

from pydantic import AliasChoices, Field

from src.schemas.base import APIModel


class CommentCreate(APIModel):
    """Schema for comment creation; `content` is accepted for older clients"""
    text: str = Field(validation_alias=AliasChoices("text", "content"))


class CommentWithCardCreate(CommentCreate):
    """Schema for POST /comments, where the card comes in the body"""
    card_id: str = Field(validation_alias=AliasChoices("cardId", "card_id"))


class CommentUpdate(APIModel):
    """Schema for comment update"""
    text: str = Field(validation_alias=AliasChoices("text", "content"))


class CommentResponse(APIModel):
    id: str
    card_id: str
    user_id: str
    text: str
    created_at: datetime
    updated_at: datetime
