"""Business logic for accounts: registration, login and profile reads."""
import hashlib
import hmac
import logging
import secrets
from typing import Dict, List, Optional

from ..errors import (
    ConflictError, InvalidCredentialsError, InvalidInputError,
)
from ..repositories.user_repository import POINTS_PER_LEVEL
from ..store import CatalogStore
from .engagement_service import rounded_mean
from .validation import require_text

logger = logging.getLogger('playhub.users')

_HASH_SCHEME = 'sha256'


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash *password* with a per-user random salt.

    Returns a ``"sha256$<salt>$<hexdigest>"`` string that
    :func:`verify_password` can check later.
    """
    salt = salt or secrets.token_hex(16)
    digest = hashlib.sha256((salt + password).encode()).hexdigest()
    return f"{_HASH_SCHEME}${salt}${digest}"


def verify_password(password: str, stored: str) -> bool:
    """Constant-time check of *password* against a :func:`hash_password`
    result.  Malformed stored values never verify."""
    try:
        scheme, salt, _digest = stored.split('$', 2)
    except (AttributeError, ValueError):
        return False
    if scheme != _HASH_SCHEME:
        return False
    return hmac.compare_digest(hash_password(password, salt), stored)


def public_user(user: Dict) -> Dict:
    """Return a copy of *user* without the ``password`` field."""
    return {k: v for k, v in user.items() if k != 'password'}


def profile_summary(user: Dict, history: List[Dict]) -> Dict:
    """Profile-page stats for *user* given their play *history*.

    ``levelProgress`` is the percentage (0-100) of the current level's
    1000-point band already earned.  ``averageScore`` and ``highestScore``
    are ``None`` until the user has played.
    """
    points = user.get('points') or 0
    level = user.get('level') or 1
    level_floor = (level - 1) * POINTS_PER_LEVEL
    progress = (points - level_floor) * 100 // POINTS_PER_LEVEL
    scores = [h.get('score') or 0 for h in history]
    return {
        'userId': user['id'],
        'level': level,
        'points': points,
        'nextLevel': level + 1,
        'levelProgress': max(0, min(100, progress)),
        'pointsToNextLevel': max(0, level * POINTS_PER_LEVEL - points),
        'gamesPlayed': len(scores),
        'averageScore': rounded_mean(scores) if scores else None,
        'highestScore': max(scores) if scores else None,
    }


class UserService:
    """Registers users and verifies logins against the store.

    Rules
    -----
    * Usernames are unique under case-insensitive comparison.
    * Passwords are stored salted and hashed; every value returned from
      this service has the ``password`` field stripped.
    * :meth:`login` checks the password.  Looking a user up by name alone
      is not a login.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(self, username: str, email: str, password: str,
                 avatar: Optional[str] = None) -> Dict:
        """Create a user at level 1 with 0 points.

        Raises:
            InvalidInputError: blank username, email or password.
            ConflictError:     the username is taken (ignoring case).
        """
        username = require_text(username, 'username')
        email = require_text(email, 'email')
        if not isinstance(password, str) or not password:
            raise InvalidInputError("password must not be empty")

        with self._store.lock:
            if self._store.users.find_by_username(username) is not None:
                raise ConflictError("Username already taken")
            user = self._store.create_user({
                'username': username,
                'email': email,
                'password': hash_password(password),
                'avatar': avatar or None,
                'level': 1,
                'points': 0,
            })
        logger.info('Registered new user: %s (id=%s)', username, user['id'])
        return public_user(user)

    def login(self, username: str, password: str) -> Dict:
        """Return the public user matching *username* and *password*.

        Raises:
            InvalidCredentialsError: unknown user or wrong password.  The
                message is the same for both so usernames cannot be discovered.
        """
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidCredentialsError("Invalid username or password")
        with self._store.lock:
            user = self._store.users.find_by_username(username.strip())
            if user is None or not verify_password(password, user['password']):
                logger.info('Failed login for username=%s', username)
                raise InvalidCredentialsError("Invalid username or password")
            return public_user(user)

    def get_user(self, user_id: int) -> Optional[Dict]:
        """Return the public user for *user_id*, or ``None``."""
        with self._store.lock:
            user = self._store.users.find(user_id)
            return public_user(user) if user is not None else None

    def get_profile_summary(self, user_id: int) -> Optional[Dict]:
        """Return :func:`profile_summary` for *user_id*, or ``None``."""
        with self._store.lock:
            user = self._store.users.find(user_id)
            if user is None:
                return None
            history = self._store.history.for_user(user_id)
            return profile_summary(user, history)
