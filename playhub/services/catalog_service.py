"""Read-only catalog queries: listings, filters, search and categories."""
import random
from typing import Dict, List, Optional

from ..store import CatalogStore
from .validation import require_int

# Categories shown on the home page and the catalog filter bar.
CATEGORIES: List[Dict] = [
    {'id': 'puzzle', 'name': 'Puzzle', 'icon': 'puzzle', 'color': 'indigo'},
    {'id': 'arcade', 'name': 'Arcade', 'icon': 'play-circle', 'color': 'pink'},
    {'id': 'adventure', 'name': 'Adventure', 'icon': 'globe', 'color': 'emerald'},
    {'id': 'action', 'name': 'Action', 'icon': 'flame', 'color': 'red'},
    {'id': 'multiplayer', 'name': 'Multiplayer', 'icon': 'users', 'color': 'violet'},
    {'id': 'fast-paced', 'name': 'Fast-Paced', 'icon': 'zap', 'color': 'amber'},
]

ALL_CATEGORIES = 'all'


def matches_category(game: Dict, category: str) -> bool:
    """True if *category* equals the game's primary or secondary tag,
    ignoring case."""
    wanted = category.casefold()
    if (game.get('category') or '').casefold() == wanted:
        return True
    secondary = game.get('secondaryCategory')
    return bool(secondary) and secondary.casefold() == wanted


def matches_search(game: Dict, term: str) -> bool:
    """True if *term* is a case-insensitive substring of the title or
    description.  A blank term matches everything."""
    needle = term.strip().casefold()
    if not needle:
        return True
    return (needle in (game.get('title') or '').casefold()
            or needle in (game.get('description') or '').casefold())


def most_played(games: List[Dict], limit: int) -> List[Dict]:
    """Sort *games* by ``playCount`` descending (stable) and keep *limit*."""
    ranked = sorted(games, key=lambda g: g.get('playCount') or 0, reverse=True)
    return ranked[:limit]


def browse_games(games: List[Dict], category: Optional[str] = None,
                 search: Optional[str] = None) -> List[Dict]:
    """Catalog page filter: category (``None``/``"all"`` = any) AND search."""
    if category and category.casefold() != ALL_CATEGORIES:
        games = [g for g in games if matches_category(g, category)]
    if search:
        games = [g for g in games if matches_search(g, search)]
    return games


def with_counts(games: List[Dict]) -> List[Dict]:
    """Return :data:`CATEGORIES` with a ``count`` of *games* in each."""
    return [dict(c, count=sum(1 for g in games if matches_category(g, c['id'])))
            for c in CATEGORIES]


def similar_to(game: Dict, games: List[Dict], limit: int,
               rng: random.Random) -> List[Dict]:
    """Up to *limit* of *games* sharing *game*'s primary category, shuffled."""
    if not game.get('category'):
        return []
    candidates = [g for g in games
                  if g.get('id') != game.get('id') and g.get('category') == game['category']]
    rng.shuffle(candidates)
    return candidates[:limit]


class CatalogService:
    """Read-side views over the store's game collection.

    Rules
    -----
    * Every listing skips games whose ``hidden`` flag is set;
      :meth:`get_game` does not, so a hidden game is still reachable by id.
    * Results are copies: mutating them never touches the store.
    * Nothing here mutates state.
    """

    def __init__(self, store: CatalogStore, rng: Optional[random.Random] = None) -> None:
        self._store = store
        self._rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _visible(self) -> List[Dict]:
        with self._store.lock:
            return [dict(g) for g in self._store.games.all() if not g.get('hidden')]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_game(self, game_id: int) -> Optional[Dict]:
        """Return the game with *game_id* (hidden or not), or ``None``."""
        with self._store.lock:
            game = self._store.games.find(game_id)
            return dict(game) if game is not None else None

    def get_games(self) -> List[Dict]:
        """Return every visible game in insertion order."""
        return self._visible()

    def get_games_by_category(self, category: str) -> List[Dict]:
        """Return visible games tagged *category* in either slot."""
        return [g for g in self._visible() if matches_category(g, category)]

    def get_featured_games(self) -> List[Dict]:
        return [g for g in self._visible() if g.get('isFeatured')]

    def get_new_games(self) -> List[Dict]:
        return [g for g in self._visible() if g.get('isNew')]

    def get_popular_games(self, limit: int = 5) -> List[Dict]:
        """Return the *limit* most-played visible games, ties in insertion
        order."""
        limit = require_int(limit, 'limit', minimum=0)
        return most_played(self._visible(), limit)

    def search_games(self, term: str) -> List[Dict]:
        """Return visible games whose title or description contains *term*."""
        return [g for g in self._visible() if matches_search(g, term)]

    def browse(self, category: Optional[str] = None,
               search: Optional[str] = None) -> List[Dict]:
        """Catalog page filter: category (``None``/``"all"`` = any) AND search."""
        return browse_games(self._visible(), category, search)

    def get_categories(self) -> List[Dict]:
        """Return the category catalog with a live count of visible games."""
        return with_counts(self._visible())

    def get_similar_games(self, game_id: int, limit: int = 3) -> List[Dict]:
        """Return up to *limit* other visible games sharing the primary
        category, in random order.  Unknown ids yield an empty list."""
        limit = require_int(limit, 'limit', minimum=0)
        game = self.get_game(game_id)
        if game is None:
            return []
        return similar_to(game, self._visible(), limit, self._rng)
