from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator

from src.schemas.base import APIModel
from src.schemas.comment import CommentResponse


def parse_due_date(value):
    if isinstance(value, str) and value.endswith('Z'):
        # Заменяем 'Z' на '+00:00' для правильной обработки UTC
        value = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if isinstance(value, datetime) and value.tzinfo is not None:
        # Храним время без часового пояса (UTC)
        return value.replace(tzinfo=None)
    return value


class CardCreate(APIModel):
    """Schema for card creation"""
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    labels: Optional[List[Any]] = None
    position: Optional[int] = Field(None, ge=0)

    @field_validator('due_date', mode='before')
    @classmethod
    def normalize_due_date(cls, value):
        return parse_due_date(value)


class CardUpdate(APIModel):
    """Schema for card update; `listId` moves the card within its board"""
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    labels: Optional[List[Any]] = None
    list_id: Optional[str] = None
    position: Optional[int] = Field(None, ge=0)

    @field_validator('due_date', mode='before')
    @classmethod
    def normalize_due_date(cls, value):
        return parse_due_date(value)


class ListCardUpdate(CardUpdate):
    """Card update addressed through its list; the card id comes in the body"""
    id: Optional[str] = None


class ListCardDelete(APIModel):
    id: Optional[str] = None


class ChecklistItemCreate(APIModel):
    text: str = Field(validation_alias=AliasChoices("text", "item"))


class ChecklistItemUpdate(APIModel):
    completed: bool


class ChecklistItemResponse(APIModel):
    id: str
    text: str
    completed: bool


class CardResponse(APIModel):
    id: str
    list_id: str
    title: str
    description: str = ""
    position: int
    due_date: Optional[datetime] = None
    labels: List[Any] = []
    attachments: List[Any] = []
    checklist: List[ChecklistItemResponse] = []
    comments: List[CommentResponse] = []
    created_at: datetime
    updated_at: datetime
