from datetime import datetime
from typing import List, Optional

from src.models.board import BoardUserRole
from src.schemas.base import APIModel
from src.schemas.board_list import ListWithCardsResponse


class BoardCreate(APIModel):
    """Schema for board creation"""
    name: str
    background: Optional[str] = None
    is_template: bool = False
    is_favorite: bool = False


class BoardUpdate(APIModel):
    """Schema for board update, omitted fields keep their value"""
    name: Optional[str] = None
    background: Optional[str] = None
    is_archived: Optional[bool] = None
    is_favorite: Optional[bool] = None
    is_template: Optional[bool] = None


class MemberResponse(APIModel):
    user_id: str
    role: BoardUserRole


class MemberCreate(APIModel):
    user_id: str
    role: BoardUserRole = BoardUserRole.MEMBER


class MemberUpdate(APIModel):
    role: BoardUserRole


class BoardResponse(APIModel):
    id: str
    name: str
    background: Optional[str] = None
    owner_id: str
    is_archived: bool
    is_favorite: bool
    is_template: bool
    created_at: datetime
    updated_at: datetime
    members: List[MemberResponse] = []


class BoardDetailResponse(BoardResponse):
    """Board with its lists, each carrying its cards"""
    lists: List[ListWithCardsResponse] = []
