"""
Static-site mode: bake the read contract into JSON files and serve from them.

Layout under the data directory (field names verbatim from the live API)::

    games.json               every game, including the ``hidden`` flag
    leaderboard.json         top players, password stripped
    comments/<gameId>.json   comments for one game, newest first

:class:`StaticCatalog` answers the same read calls as the live services from
those files, either on disk or over HTTP, and turns every mutation into a
logged no-op.
"""
import json
import logging
import os
import random
import tempfile
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .errors import InvalidCredentialsError, NotFoundError, StaticDataError
from .services.catalog_service import (
    browse_games, matches_category, matches_search, most_played, similar_to,
    with_counts,
)
from .services.engagement_service import RATING_MAX, RATING_MIN, EngagementService
from .services.leaderboard_service import LeaderboardService, rank_users, top_by_points
from .services.user_service import profile_summary, public_user
from .services.validation import require_id, require_int, require_text
from .store import CatalogStore

logger = logging.getLogger('playhub.static')

GAMES_FILE = 'games.json'
LEADERBOARD_FILE = 'leaderboard.json'
COMMENTS_DIR = 'comments'

REQUEST_TIMEOUT = 10


def atomic_write_json(path: str, data: Any) -> None:
    """Write *data* as JSON to *path* atomically (write-then-rename).

    Raises:
        OSError: If the write or rename fails.
    """
    dir_name = os.path.dirname(os.path.abspath(path))
    os.makedirs(dir_name, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=dir_name, suffix='.tmp')
    try:
        with os.fdopen(fd, 'w') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def export_static_site(store: CatalogStore, out_dir: str,
                       leaderboard_limit: int = 10) -> Dict[str, int]:
    """Snapshot *store* into *out_dir*.

    Returns:
        Counts of what was written: ``games``, ``leaderboard`` and
        ``comment_files``.
    """
    engagement = EngagementService(store)
    with store.lock:
        games = [dict(g) for g in store.games.all()]
    leaderboard = LeaderboardService(store).get_top_players(leaderboard_limit)

    atomic_write_json(os.path.join(out_dir, GAMES_FILE), games)
    atomic_write_json(os.path.join(out_dir, LEADERBOARD_FILE), leaderboard)

    comment_files = 0
    for game in games:
        comments = engagement.get_comments_by_game(game['id'])
        if not comments:
            continue
        atomic_write_json(os.path.join(out_dir, COMMENTS_DIR, f"{game['id']}.json"), comments)
        comment_files += 1

    logger.info('Exported %d games, %d leaderboard rows, %d comment files to %s',
                len(games), len(leaderboard), comment_files, out_dir)
    return {'games': len(games), 'leaderboard': len(leaderboard),
            'comment_files': comment_files}


class StaticCatalog:
    """Read-only catalog backed by baked JSON files.

    *source* is either a directory or an ``http(s)://`` base URL (the
    directory served at ``/data`` by a static host).  ``games.json`` is
    cached for *cache_seconds*; hidden games are filtered out of every
    listing but, as in live mode, :meth:`get_game` still finds them.

    Method names mirror the live services so the web layer can use either.
    Mutators only log what would have happened.
    """

    def __init__(self, source: str, cache_seconds: int = 60,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.monotonic,
                 rng: Optional[random.Random] = None) -> None:
        self.source = source
        self.cache_seconds = cache_seconds
        self._is_remote = source.startswith(('http://', 'https://'))
        self._session = session or (requests.Session() if self._is_remote else None)
        self._clock = clock
        self._rng = rng or random.Random()
        self._games_cache: Optional[List[Dict]] = None
        self._cache_time = 0.0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self, path: str) -> Any:
        """Fetch and decode one JSON file relative to :attr:`source`.

        Raises:
            StaticDataError: missing file, HTTP error or invalid JSON.
        """
        if self._is_remote:
            url = f"{self.source.rstrip('/')}/{path}"
            try:
                resp = self._session.get(url, timeout=REQUEST_TIMEOUT)
                resp.raise_for_status()
                return resp.json()
            except (requests.RequestException, ValueError) as exc:
                raise StaticDataError(f"Failed to load static data: {path}") from exc

        full_path = os.path.join(self.source, *path.split('/'))
        try:
            with open(full_path, 'r') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StaticDataError(f"Failed to load static data: {path}") from exc

    def _all_games(self) -> List[Dict]:
        now = self._clock()
        if self._games_cache is None or now - self._cache_time > self.cache_seconds:
            games = self._load(GAMES_FILE)
            if not isinstance(games, list):
                raise StaticDataError(f"{GAMES_FILE} is not a list")
            self._games_cache = games
            self._cache_time = now
            logger.info('Loaded %d games from %s', len(games), GAMES_FILE)
        return [dict(g) for g in self._games_cache]

    def _visible(self) -> List[Dict]:
        return [g for g in self._all_games() if not g.get('hidden')]

    def invalidate(self) -> None:
        """Drop the cached ``games.json`` so the next call re-reads it."""
        self._games_cache = None

    # ------------------------------------------------------------------
    # Catalog reads
    # ------------------------------------------------------------------

    def get_game(self, game_id: int) -> Optional[Dict]:
        for game in self._all_games():
            if game.get('id') == game_id:
                return game
        return None

    def get_games(self) -> List[Dict]:
        return self._visible()

    def get_games_by_category(self, category: str) -> List[Dict]:
        return [g for g in self._visible() if matches_category(g, category)]

    def get_featured_games(self) -> List[Dict]:
        return [g for g in self._visible() if g.get('isFeatured')]

    def get_new_games(self) -> List[Dict]:
        return [g for g in self._visible() if g.get('isNew')]

    def get_popular_games(self, limit: int = 10) -> List[Dict]:
        return most_played(self._visible(), require_int(limit, 'limit', minimum=0))

    def search_games(self, term: str) -> List[Dict]:
        return [g for g in self._visible() if matches_search(g, term)]

    def browse(self, category: Optional[str] = None,
               search: Optional[str] = None) -> List[Dict]:
        return browse_games(self._visible(), category, search)

    def get_categories(self) -> List[Dict]:
        return with_counts(self._visible())

    def get_similar_games(self, game_id: int, limit: int = 3) -> List[Dict]:
        limit = require_int(limit, 'limit', minimum=0)
        game = self.get_game(game_id)
        if game is None:
            return []
        return similar_to(game, self._visible(), limit, self._rng)

    # ------------------------------------------------------------------
    # Engagement / user reads
    # ------------------------------------------------------------------

    def get_comments_by_game(self, game_id: int) -> List[Dict]:
        """Comments for *game_id*; a game without a comments file has none."""
        try:
            comments = self._load(f"{COMMENTS_DIR}/{game_id}.json")
        except StaticDataError:
            logger.debug('No comments found for game %s', game_id)
            return []
        return comments if isinstance(comments, list) else []

    def get_ratings_by_game(self, game_id: int) -> List[Dict]:
        return []

    def get_user_rating(self, game_id: int, user_id: int) -> Optional[Dict]:
        return None

    def _leaderboard(self) -> List[Dict]:
        rows = self._load(LEADERBOARD_FILE)
        if not isinstance(rows, list):
            raise StaticDataError(f"{LEADERBOARD_FILE} is not a list")
        return [public_user(r) for r in rows]

    def get_top_players(self, limit: int = 10) -> List[Dict]:
        return top_by_points(self._leaderboard(), limit)

    def get_rankings(self, sort_key: str = 'points', descending: bool = True,
                     limit: int = 10) -> List[Dict]:
        return rank_users(self._leaderboard(), sort_key, descending, limit)

    def get_user(self, user_id: int) -> Optional[Dict]:
        """Only users baked into the leaderboard are known."""
        for user in self._leaderboard():
            if user.get('id') == user_id:
                return user
        return None

    def get_profile_summary(self, user_id: int) -> Optional[Dict]:
        """Level progress for a leaderboard user; no history is baked."""
        user = self.get_user(user_id)
        return profile_summary(user, []) if user is not None else None

    def get_game_history_by_user(self, user_id: int) -> List[Dict]:
        return []

    # ------------------------------------------------------------------
    # Mutations (logged no-ops)
    # ------------------------------------------------------------------

    def _require_game(self, game_id) -> Dict:
        game = self.get_game(require_id(game_id, 'gameId'))
        if game is None:
            raise NotFoundError("Game not found")
        return game

    def record_play(self, game_id, user_id=None, score=None) -> Dict:
        """Return the game unchanged.

        Raises:
            NotFoundError: the game is not in ``games.json``.
        """
        game = self._require_game(game_id)
        logger.info('Game play recorded (static): %s', game.get('title'))
        return game

    def submit_rating(self, game_id, user_id, value) -> Dict:
        """Validate like the live service, then only log the rating."""
        game = self._require_game(game_id)
        value = require_int(value, 'rating', minimum=RATING_MIN, maximum=RATING_MAX)
        logger.info('Game rated (static): ID %s, Rating: %s', game['id'], value)
        return {'gameId': game['id'], 'userId': user_id, 'rating': value, 'static': True}

    def submit_comment(self, game_id, user_id, content) -> Dict:
        """Validate like the live service, then only log the comment."""
        game = self._require_game(game_id)
        content = require_text(content, 'content')
        logger.info('Comment added (static): ID %s, Comment: %s', game['id'], content)
        return {'gameId': game['id'], 'userId': user_id, 'content': content, 'static': True}

    def register(self, username, email, password, avatar=None) -> Dict:
        logger.info('User registration ignored (static): %s', username)
        return {'username': username, 'email': email, 'avatar': avatar, 'static': True}

    def login(self, username, password) -> Dict:
        """Baked files carry no credentials, so nobody can log in."""
        raise InvalidCredentialsError("Login is not available on the static site")
