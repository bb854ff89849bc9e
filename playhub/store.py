"""The Catalog Store: owner of every entity collection."""
import logging
import threading
from typing import Dict

from .repositories import (
    CommentRepository, GameRepository, HistoryRepository, RatingRepository,
    UserRepository,
)

logger = logging.getLogger('playhub.store')


class CatalogStore:
    """Owns users, games, comments, ratings and play history.

    One instance per process (or per test).  Services hold a reference to
    the store and must wrap every read-modify-write in ``with store.lock:``;
    the rating average and the points/level recompute are not safe to
    interleave when Flask serves requests on several threads.

    The lock is re-entrant so a mutator may call another mutator (e.g.
    ``record_play`` awarding points) while already holding it.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users = UserRepository()
        self.games = GameRepository()
        self.comments = CommentRepository()
        self.ratings = RatingRepository()
        self.history = HistoryRepository()

    # ------------------------------------------------------------------
    # Creation (ids + defaults are applied by the repositories)
    # ------------------------------------------------------------------

    def create_user(self, fields: Dict) -> Dict:
        """Create a user; the returned record still carries ``password``."""
        with self.lock:
            return self.users.create(fields)

    def create_game(self, fields: Dict) -> Dict:
        with self.lock:
            return self.games.create(fields)

    def create_comment(self, fields: Dict) -> Dict:
        with self.lock:
            return self.comments.create(fields)

    def create_rating(self, fields: Dict) -> Dict:
        """Insert or overwrite the rating for ``(gameId, userId)``."""
        with self.lock:
            return self.ratings.upsert(fields)

    def create_game_history(self, fields: Dict) -> Dict:
        with self.lock:
            return self.history.create(fields)

    def counts(self) -> Dict[str, int]:
        """Return the size of every collection (used for status/logging)."""
        with self.lock:
            return {
                'users': len(self.users),
                'games': len(self.games),
                'comments': len(self.comments),
                'ratings': len(self.ratings),
                'history': len(self.history),
            }
