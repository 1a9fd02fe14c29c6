from datetime import datetime
from typing import List, Optional

from pydantic import Field

from src.schemas.base import APIModel
from src.schemas.card import CardResponse


class ListCreate(APIModel):
    """Schema for list creation"""
    title: str
    position: Optional[int] = Field(None, ge=0)


class ListUpdate(APIModel):
    """Schema for list update"""
    title: Optional[str] = None
    position: Optional[int] = Field(None, ge=0)


class ListResponse(APIModel):
    id: str
    board_id: str
    title: str
    position: int
    created_at: datetime
    updated_at: datetime


class ListWithCardsResponse(ListResponse):
    cards: List[CardResponse] = []
