"""Business logic for per-user play history."""
from typing import Dict, List

from ..repositories.base import parse_timestamp
from ..store import CatalogStore


def newest_first(rows: List[Dict], field: str) -> List[Dict]:
    """Sort *rows* by the ISO timestamp in *field*, newest first; equal
    timestamps put the higher id first."""
    return sorted(rows, key=lambda r: (parse_timestamp(r[field]), r['id']), reverse=True)


class HistoryService:
    """Read-side view of the play-session rows.

    Rows are written by
    :meth:`~playhub.services.engagement_service.EngagementService.record_play`;
    this service only lists them.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def get_game_history_by_user(self, user_id: int) -> List[Dict]:
        """Return *user_id*'s sessions, most recent ``playedAt`` first."""
        with self._store.lock:
            rows = [dict(h) for h in self._store.history.for_user(user_id)]
        return newest_first(rows, 'playedAt')
