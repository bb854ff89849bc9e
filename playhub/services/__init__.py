"""Service layer: one class per area of business logic."""
from .catalog_service import CatalogService
from .engagement_service import EngagementService
from .user_service import UserService
from .leaderboard_service import LeaderboardService
from .history_service import HistoryService

__all__ = [
    'CatalogService',
    'EngagementService',
    'UserService',
    'LeaderboardService',
    'HistoryService',
]
