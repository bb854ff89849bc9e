"""Repository for game comments."""
from typing import Dict, List

from .base import BaseRepository, utc_now


class CommentRepository(BaseRepository):
    """Stores free-text comments attached to a game and an author."""

    def create(self, fields: Dict) -> Dict:
        record = {
            'gameId': fields['gameId'],
            'userId': fields['userId'],
            'content': fields['content'],
            'createdAt': utc_now(),
        }
        return self._insert(record)

    def for_game(self, game_id: int) -> List[Dict]:
        return self.filter(lambda c: c['gameId'] == game_id)
