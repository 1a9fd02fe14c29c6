from fastapi import APIRouter

from src.core import get_settings
from src.api.v1.auth import router as auth_router
from src.api.v1.users import router as users_router
from src.api.v1.boards import router as boards_router
from src.api.v1.board_members import router as board_members_router
from src.api.v1.lists import router as lists_router
from src.api.v1.cards import router as cards_router, list_cards_router
from src.api.v1.comments import router as comments_router

settings = get_settings()

# Create main API router
api_router = APIRouter(prefix=settings.API_PREFIX)

# Include routers
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(boards_router)
api_router.include_router(board_members_router)
api_router.include_router(lists_router)
api_router.include_router(list_cards_router)
api_router.include_router(cards_router)
api_router.include_router(comments_router)
