"""Repository for user accounts."""
from typing import Dict, Optional

from .base import BaseRepository, utc_now

POINTS_PER_LEVEL = 1000


def level_for_points(points: int) -> int:
    """Return the level a user with *points* points is at (1-based)."""
    return points // POINTS_PER_LEVEL + 1


class UserRepository(BaseRepository):
    """Stores users.

    Schema::

        {
            "id":        <int>,
            "username":  <str, unique case-insensitively>,
            "password":  <str, salted hash>,
            "email":     <str>,
            "avatar":    <str or None>,
            "level":     <int >= 1>,
            "points":    <int >= 0>,
            "createdAt": <ISO-8601 str>
        }
    """

    def create(self, fields: Dict) -> Dict:
        """Insert a user.

        ``points`` defaults to 0; an unset ``level`` is derived from the
        points so seeded accounts start out consistent.
        """
        points = fields.get('points') or 0
        level = fields.get('level')
        if not level:
            level = level_for_points(points)
        record = {
            'username': fields['username'],
            'password': fields['password'],
            'email': fields['email'],
            'avatar': fields.get('avatar'),
            'level': level,
            'points': points,
            'createdAt': utc_now(),
        }
        return self._insert(record)

    def find_by_username(self, username: str) -> Optional[Dict]:
        """Case-insensitive lookup by username."""
        wanted = username.casefold()
        for user in self.data.values():
            if user['username'].casefold() == wanted:
                return user
        return None
