"""In-memory repositories, one per entity."""
from .user_repository import UserRepository
from .game_repository import GameRepository
from .comment_repository import CommentRepository
from .rating_repository import RatingRepository
from .history_repository import HistoryRepository

__all__ = [
    'UserRepository',
    'GameRepository',
    'CommentRepository',
    'RatingRepository',
    'HistoryRepository',
]
