"""Repository for catalog entries."""
from typing import Dict

from .base import BaseRepository, utc_now


class GameRepository(BaseRepository):
    """Stores games.

    ``rating`` and ``playCount`` are derived fields maintained by the
    engagement service; ``hidden`` games stay in the collection but are
    skipped by every listing query.
    """

    def create(self, fields: Dict) -> Dict:
        """Insert a game, applying the catalog defaults."""
        record = {
            'title': fields['title'],
            'description': fields['description'],
            'category': fields['category'],
            'secondaryCategory': fields.get('secondaryCategory'),
            'thumbnailUrl': fields['thumbnailUrl'],
            'isFeatured': bool(fields.get('isFeatured', False)),
            'isNew': bool(fields.get('isNew', False)),
            'rating': fields.get('rating') or 0,
            'playCount': fields.get('playCount') or 0,
            'hidden': bool(fields.get('hidden', False)),
            'createdAt': utc_now(),
        }
        return self._insert(record)
