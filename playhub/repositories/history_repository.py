"""Repository for play sessions."""
from typing import Dict, List

from .base import BaseRepository, normalize_timestamp, utc_now


class HistoryRepository(BaseRepository):
    """Stores one row per play session.

    Rows carry ``playedAt`` instead of ``createdAt``; callers may supply it
    (seed data is backdated), otherwise it is stamped with the current time.
    """

    def create(self, fields: Dict) -> Dict:
        played_at = fields.get('playedAt')
        record = {
            'gameId': fields['gameId'],
            'userId': fields['userId'],
            'score': fields.get('score') or 0,
            'playedAt': normalize_timestamp(played_at) if played_at else utc_now(),
        }
        return self._insert(record)

    def for_user(self, user_id: int) -> List[Dict]:
        return self.filter(lambda h: h['userId'] == user_id)
