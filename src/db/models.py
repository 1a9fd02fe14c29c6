# Import all models here so metadata.create_all sees every table
from src.db.base import Base
from src.models.user import User
from src.models.board import Board, BoardMember, BoardUserRole
from src.models.board_list import BoardList
from src.models.card import Card, ChecklistItem, Comment
