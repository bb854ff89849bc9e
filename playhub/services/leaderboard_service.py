"""Business logic for the points leaderboard."""
from typing import Dict, List

from ..errors import InvalidInputError
from ..store import CatalogStore
from .user_service import public_user
from .validation import require_int

SORT_KEYS = ('points', 'level', 'username')


def top_by_points(users: List[Dict], limit: int) -> List[Dict]:
    """Sort *users* by ``points`` descending (stable) and keep *limit*."""
    limit = require_int(limit, 'limit', minimum=0)
    return sorted(users, key=lambda u: u.get('points') or 0, reverse=True)[:limit]


def rank_users(users: List[Dict], sort_key: str = 'points',
               descending: bool = True, limit: int = 10) -> List[Dict]:
    """Return copies of *users* sorted by *sort_key*, each with a 1-based
    ``rank``.

    Args:
        users:      User dicts (already stripped of passwords).
        sort_key:   One of ``'points'``, ``'level'``, ``'username'``.
                    Usernames compare case-insensitively.
        descending: Sort direction.
        limit:      Maximum number of rows.

    Raises:
        InvalidInputError: unknown *sort_key* or negative *limit*.
    """
    if sort_key not in SORT_KEYS:
        raise InvalidInputError(f"sort must be one of: {', '.join(SORT_KEYS)}")
    limit = require_int(limit, 'limit', minimum=0)

    if sort_key == 'username':
        key = lambda u: u['username'].casefold()  # noqa: E731
    else:
        key = lambda u: u.get(sort_key) or 0  # noqa: E731
    rows = [dict(u) for u in sorted(users, key=key, reverse=descending)[:limit]]
    for rank, row in enumerate(rows, start=1):
        row['rank'] = rank
    return rows


class LeaderboardService:
    """Ranks users by their progression.

    Users have no hidden flag, so every account is eligible.  Every row
    returned here has the ``password`` field stripped.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def _users(self) -> List[Dict]:
        with self._store.lock:
            return [public_user(u) for u in self._store.users.all()]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_top_players(self, limit: int = 10) -> List[Dict]:
        """Return the *limit* users with the most points; ties keep
        registration order."""
        return top_by_points(self._users(), limit)

    def get_rankings(self, sort_key: str = 'points', descending: bool = True,
                     limit: int = 10) -> List[Dict]:
        """See :func:`rank_users`."""
        return rank_users(self._users(), sort_key, descending, limit)
