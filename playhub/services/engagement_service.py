"""Business logic for plays, points, ratings and comments.

These are the only operations that change derived state (``Game.rating``,
``Game.playCount``, ``User.points``/``User.level``).  Each one runs under the
store lock so the read-then-write recomputes cannot interleave.
"""
import logging
from typing import Dict, List, Optional

from ..errors import NotFoundError
from ..repositories.user_repository import level_for_points
from ..store import CatalogStore
from .history_service import newest_first
from .validation import require_id, require_int, require_text

logger = logging.getLogger('playhub.engagement')

RATING_MIN = 1
RATING_MAX = 5
SCORE_PER_POINT = 100


def rounded_mean(values: List[int]) -> int:
    """Mean of *values* rounded half away from zero (4.5 -> 5).

    Integer arithmetic keeps ``round()``'s half-to-even behaviour and float
    error out of it.  Values are non-negative here, so "away from zero"
    is "up".
    """
    total, count = sum(values), len(values)
    return (2 * total + count) // (2 * count)


def points_for_score(score: int) -> int:
    """Points awarded for a play scoring *score* (one per full 100)."""
    return score // SCORE_PER_POINT


class EngagementService:
    """Applies engagement mutations to a :class:`~playhub.store.CatalogStore`.

    Rules
    -----
    * ``record_play`` on an unknown game raises before touching anything.
    * A play with a user appends a history row; a positive score also
      awards ``score // 100`` points.  A vanished user only skips the
      award, never the play.
    * ``level == points // 1000 + 1`` after every award.
    * One rating per ``(game, user)``; re-rating overwrites.  After every
      rating the game's ``rating`` is the rounded mean of its ratings.
    * Comments are stored trimmed and must not be blank.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_game(self, game_id) -> Dict:
        game = self._store.games.find(require_id(game_id, 'gameId'))
        if game is None:
            raise NotFoundError("Game not found")
        return game

    def _require_user(self, user_id) -> Dict:
        user = self._store.users.find(require_id(user_id, 'userId'))
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _recompute_rating(self, game: Dict) -> None:
        values = [r['rating'] for r in self._store.ratings.for_game(game['id'])]
        # With no ratings the last stored value (seeded or 0) stands.
        if values:
            game['rating'] = rounded_mean(values)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def record_play(self, game_id, user_id=None, score=None) -> Dict:
        """Count one play of *game_id* and return the updated game.

        Raises:
            NotFoundError:     the game does not exist (nothing is changed).
            InvalidInputError: malformed ids or a negative/non-integer score.
        """
        with self._store.lock:
            game = self._require_game(game_id)
            score = 0 if score is None else require_int(score, 'score', minimum=0)
            if user_id is not None:
                user_id = require_id(user_id, 'userId')

            game['playCount'] = (game.get('playCount') or 0) + 1

            if user_id is not None:
                self._store.create_game_history({
                    'gameId': game['id'],
                    'userId': user_id,
                    'score': score,
                })
                if score > 0:
                    try:
                        self.award_points(user_id, points_for_score(score))
                    except NotFoundError:
                        logger.warning('Play on game %s by unknown user %s: no points awarded',
                                       game['id'], user_id)

            logger.info('Recorded play of game %s (playCount=%s, user=%s, score=%s)',
                        game['id'], game['playCount'], user_id, score)
            return dict(game)

    def award_points(self, user_id, points) -> Dict:
        """Add *points* to the user and recompute their level.

        Returns the updated user record (password included; callers that
        expose it must strip it).

        Raises:
            NotFoundError: the user does not exist.
        """
        points = require_int(points, 'points', minimum=0)
        with self._store.lock:
            user = self._require_user(user_id)
            user['points'] = (user.get('points') or 0) + points
            user['level'] = level_for_points(user['points'])
            logger.debug('User %s now has %s points (level %s)',
                         user['id'], user['points'], user['level'])
            return dict(user)

    def submit_rating(self, game_id, user_id, value) -> Dict:
        """Store *user_id*'s 1–5 rating of *game_id* and refresh the average.

        Raises:
            NotFoundError:     the game or user does not exist.
            InvalidInputError: *value* is not an integer in 1..5.
        """
        with self._store.lock:
            game = self._require_game(game_id)
            user = self._require_user(user_id)
            value = require_int(value, 'rating', minimum=RATING_MIN, maximum=RATING_MAX)
            rating = self._store.create_rating({
                'gameId': game['id'],
                'userId': user['id'],
                'rating': value,
            })
            self._recompute_rating(game)
            logger.info('User %s rated game %s: %s (average now %s)',
                        user['id'], game['id'], value, game['rating'])
            return dict(rating)

    def submit_comment(self, game_id, user_id, content) -> Dict:
        """Attach a comment to *game_id*.

        Raises:
            NotFoundError:     the game or user does not exist.
            InvalidInputError: *content* is blank.
        """
        with self._store.lock:
            game = self._require_game(game_id)
            user = self._require_user(user_id)
            content = require_text(content, 'content')
            comment = self._store.create_comment({
                'gameId': game['id'],
                'userId': user['id'],
                'content': content,
            })
            logger.info('User %s commented on game %s (comment %s)',
                        user['id'], game['id'], comment['id'])
            return dict(comment)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_comments_by_game(self, game_id: int) -> List[Dict]:
        """Comments on *game_id*, newest first (ties: higher id first)."""
        with self._store.lock:
            rows = [dict(c) for c in self._store.comments.for_game(game_id)]
        return newest_first(rows, 'createdAt')

    def get_ratings_by_game(self, game_id: int) -> List[Dict]:
        with self._store.lock:
            return [dict(r) for r in self._store.ratings.for_game(game_id)]

    def get_user_rating(self, game_id: int, user_id: int) -> Optional[Dict]:
        """The rating *user_id* gave *game_id*, or ``None``."""
        with self._store.lock:
            rating = self._store.ratings.find_pair(game_id, user_id)
            return dict(rating) if rating is not None else None
