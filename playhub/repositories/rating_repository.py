"""Repository for per-user game ratings."""
from typing import Dict, List, Optional

from .base import BaseRepository, utc_now


class RatingRepository(BaseRepository):
    """Stores 1–5 ratings.

    At most one row exists per ``(gameId, userId)`` pair; :meth:`upsert`
    overwrites the value of an existing row and keeps its id.
    """

    def __init__(self) -> None:
        super().__init__()
        self._by_pair: Dict[tuple, int] = {}

    def find_pair(self, game_id: int, user_id: int) -> Optional[Dict]:
        """Return the rating *user_id* gave *game_id*, or ``None``."""
        rating_id = self._by_pair.get((game_id, user_id))
        return self.data.get(rating_id) if rating_id is not None else None

    def upsert(self, fields: Dict) -> Dict:
        """Insert a rating, or replace the value of the pair's existing one."""
        existing = self.find_pair(fields['gameId'], fields['userId'])
        if existing is not None:
            existing['rating'] = fields['rating']
            self._log.debug("Updated rating id=%s", existing['id'])
            return existing
        record = self._insert({
            'gameId': fields['gameId'],
            'userId': fields['userId'],
            'rating': fields['rating'],
            'createdAt': utc_now(),
        })
        self._by_pair[(record['gameId'], record['userId'])] = record['id']
        return record

    def for_game(self, game_id: int) -> List[Dict]:
        return self.filter(lambda r: r['gameId'] == game_id)
