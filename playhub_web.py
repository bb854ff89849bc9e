#!/usr/bin/env python3
"""
PlayHub Web - JSON API for the casual games catalog.

Serves the catalog either from a live in-memory store (dynamic mode) or from
baked JSON files (static mode, where writes are logged and ignored).
"""

import argparse
import logging
import os
from typing import Dict, Optional

from flask import (
    Blueprint, Flask, current_app, jsonify, request, send_from_directory,
    session,
)
from werkzeug.exceptions import HTTPException

from openapi_spec import build_spec
from playhub import __version__
from playhub.config import MODE_STATIC, load_config
from playhub.errors import InvalidInputError, NotFoundError, PlayHubError
from playhub.logs import setup_logging
from playhub.seed import load_sample_data
from playhub.services import (
    CatalogService, EngagementService, HistoryService, LeaderboardService,
    UserService,
)
from playhub.services.validation import require_id
from playhub.static_site import StaticCatalog
from playhub.store import CatalogStore

web_logger = logging.getLogger('playhub.web')

api = Blueprint('api', __name__)


# ===========================================================================================
# Helpers
# ===========================================================================================

def _services() -> Dict:
    return current_app.extensions['playhub']


def _json_body() -> Dict:
    """Return the request's JSON object, or ``{}`` when there is no body."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def _created(payload: Dict):
    """201 for a stored write; 202 when static mode only logged it."""
    return jsonify(payload), 202 if payload.get('static') else 201


def _acting_user_id(data: Dict):
    """``userId`` from the body, falling back to the logged-in user."""
    user_id = data.get('userId')
    if user_id is None:
        user_id = session.get('user_id')
    return user_id


# ===========================================================================================
# Error handling
# ===========================================================================================

@api.app_errorhandler(PlayHubError)
def handle_playhub_error(exc: PlayHubError):
    return jsonify({'error': str(exc)}), exc.status_code


@api.app_errorhandler(Exception)
def handle_unexpected_error(exc: Exception):
    if isinstance(exc, HTTPException):
        return jsonify({'error': exc.description}), exc.code
    web_logger.exception('Unhandled error on %s %s: %s', request.method, request.path, exc)
    return jsonify({'error': 'Internal server error'}), 500


# ===========================================================================================
# Games
# ===========================================================================================

@api.route('/api/games', methods=['GET'])
def api_games():
    """List visible games, optionally filtered like the catalog page."""
    category = request.args.get('category')
    search = request.args.get('search')
    catalog = _services()['catalog']
    if category or search:
        return jsonify(catalog.browse(category=category, search=search))
    return jsonify(catalog.get_games())


@api.route('/api/games/featured', methods=['GET'])
def api_games_featured():
    return jsonify(_services()['catalog'].get_featured_games())


@api.route('/api/games/new', methods=['GET'])
def api_games_new():
    return jsonify(_services()['catalog'].get_new_games())


@api.route('/api/games/popular', methods=['GET'])
def api_games_popular():
    limit = request.args.get('limit', current_app.config['PLAYHUB']['popular_limit'])
    return jsonify(_services()['catalog'].get_popular_games(limit))


@api.route('/api/games/category/<category>', methods=['GET'])
def api_games_by_category(category):
    return jsonify(_services()['catalog'].get_games_by_category(category))


@api.route('/api/games/<game_id>', methods=['GET'])
def api_game(game_id):
    game = _services()['catalog'].get_game(require_id(game_id, 'gameId'))
    if game is None:
        raise NotFoundError("Game not found")
    return jsonify(game)


@api.route('/api/games/<game_id>/similar', methods=['GET'])
def api_game_similar(game_id):
    limit = request.args.get('limit', 3)
    return jsonify(_services()['catalog'].get_similar_games(require_id(game_id, 'gameId'), limit))


@api.route('/api/categories', methods=['GET'])
def api_categories():
    return jsonify(_services()['catalog'].get_categories())


# ===========================================================================================
# Engagement
# ===========================================================================================

@api.route('/api/games/<game_id>/play', methods=['POST'])
def api_game_play(game_id):
    """Record a play; returns the updated game."""
    data = _json_body()
    game = _services()['engagement'].record_play(
        game_id,
        user_id=_acting_user_id(data),
        score=data.get('score'),
    )
    return jsonify(game)


@api.route('/api/games/<game_id>/comments', methods=['GET'])
def api_game_comments(game_id):
    return jsonify(_services()['engagement'].get_comments_by_game(require_id(game_id, 'gameId')))


@api.route('/api/games/<game_id>/comments', methods=['POST'])
def api_game_comment_create(game_id):
    data = _json_body()
    user_id = _acting_user_id(data)
    if user_id is None or 'content' not in data:
        raise InvalidInputError("userId and content required")
    comment = _services()['engagement'].submit_comment(game_id, user_id, data['content'])
    return _created(comment)


@api.route('/api/games/<game_id>/ratings', methods=['GET'])
def api_game_ratings(game_id):
    game_id = require_id(game_id, 'gameId')
    engagement = _services()['engagement']
    user_id = request.args.get('userId')
    if user_id is not None:
        rating = engagement.get_user_rating(game_id, require_id(user_id, 'userId'))
        return jsonify([rating] if rating else [])
    return jsonify(engagement.get_ratings_by_game(game_id))


@api.route('/api/games/<game_id>/rate', methods=['POST'])
@api.route('/api/games/<game_id>/ratings', methods=['POST'])
def api_game_rate(game_id):
    data = _json_body()
    user_id = _acting_user_id(data)
    if user_id is None or 'rating' not in data:
        raise InvalidInputError("userId and rating required")
    rating = _services()['engagement'].submit_rating(game_id, user_id, data['rating'])
    return _created(rating)


# ===========================================================================================
# Users
# ===========================================================================================

@api.route('/api/users', methods=['POST'])
def api_user_register():
    """Register a new user"""
    data = _json_body()
    missing = [f for f in ('username', 'email', 'password') if not data.get(f)]
    if missing:
        raise InvalidInputError(f"Missing required field(s): {', '.join(missing)}")
    web_logger.info('Register endpoint called for username=%s', data['username'])
    user = _services()['users'].register(
        data['username'], data['email'], data['password'], avatar=data.get('avatar'),
    )
    return _created(user)


@api.route('/api/users/<user_id>', methods=['GET'])
def api_user(user_id):
    user = _services()['users'].get_user(require_id(user_id, 'userId'))
    if user is None:
        raise NotFoundError("User not found")
    return jsonify(user)


@api.route('/api/users/<user_id>/history', methods=['GET'])
def api_user_history(user_id):
    user_id = require_id(user_id, 'userId')
    if _services()['users'].get_user(user_id) is None:
        raise NotFoundError("User not found")
    return jsonify(_services()['history'].get_game_history_by_user(user_id))


@api.route('/api/users/<user_id>/profile', methods=['GET'])
def api_user_profile(user_id):
    """Level progress and score stats for the profile page."""
    summary = _services()['users'].get_profile_summary(require_id(user_id, 'userId'))
    if summary is None:
        raise NotFoundError("User not found")
    return jsonify(summary)


@api.route('/api/leaderboard', methods=['GET'])
def api_leaderboard():
    """Top players; ``sort``/``order`` switch to the ranked table view."""
    leaderboard = _services()['leaderboard']
    limit = request.args.get('limit', current_app.config['PLAYHUB']['leaderboard_limit'])
    sort_key = request.args.get('sort')
    order = request.args.get('order')
    if sort_key is None and order is None:
        return jsonify(leaderboard.get_top_players(limit))
    if order not in (None, 'asc', 'desc'):
        raise InvalidInputError("order must be 'asc' or 'desc'")
    return jsonify(leaderboard.get_rankings(sort_key or 'points',
                                            descending=(order != 'asc'),
                                            limit=limit))


# ===========================================================================================
# Authentication
# ===========================================================================================

@api.route('/api/auth/login', methods=['POST'])
def api_auth_login():
    """Log in a user"""
    data = _json_body()
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    web_logger.info('Login endpoint called for username=%s', username)

    if not username or not password:
        raise InvalidInputError("Username and password required")

    user = _services()['users'].login(username, password)
    session['user_id'] = user['id']
    web_logger.info('User logged in: %s', user['username'])
    return jsonify(user)


@api.route('/api/auth/logout', methods=['POST'])
def api_auth_logout():
    """Log out the current user"""
    user_id = session.pop('user_id', None)
    web_logger.info('User logged out: %s', user_id)
    return jsonify({'message': 'Logged out'})


@api.route('/api/auth/current', methods=['GET'])
def api_auth_current():
    """Get current logged-in user"""
    user_id = session.get('user_id')
    user = _services()['users'].get_user(user_id) if user_id is not None else None
    if user is None:
        return jsonify({'error': 'Not logged in'}), 401
    return jsonify(user)


# ===========================================================================================
# Status, docs and static data
# ===========================================================================================

@api.route('/api/status', methods=['GET'])
def api_status():
    status = {'mode': current_app.config['PLAYHUB']['mode'], 'version': __version__}
    store = current_app.extensions.get('playhub_store')
    if store is not None:
        status['counts'] = store.counts()
    return jsonify(status)


@api.route('/api/openapi.json', methods=['GET'])
def api_openapi():
    return jsonify(build_spec(server_url=request.host_url.rstrip('/')))


@api.route('/data/<path:filename>', methods=['GET'])
def static_data(filename):
    """Serve baked JSON files (the static-site data directory)."""
    data_dir = os.path.abspath(current_app.config['PLAYHUB']['data_dir'])
    return send_from_directory(data_dir, filename)


# ===========================================================================================
# Application factory
# ===========================================================================================

def create_app(config: Optional[Dict] = None, store: Optional[CatalogStore] = None,
               static_catalog: Optional[StaticCatalog] = None) -> Flask:
    """Build the Flask app.

    Args:
        config:         Config dict (see :func:`playhub.config.load_config`);
                        loaded from the environment when omitted.
        store:          Store to serve in dynamic mode.  A fresh one (seeded
                        unless ``config['seed']`` is false) is created when
                        omitted.
        static_catalog: Catalog to serve in static mode; defaults to one
                        reading ``config['data_dir']``.
    """
    config = dict(config) if config is not None else load_config()

    app = Flask(__name__, static_folder=None)
    app.secret_key = config.get('secret_key') or os.urandom(24)
    app.config['PLAYHUB'] = config

    if config['mode'] == MODE_STATIC:
        backend = static_catalog or StaticCatalog(
            config['data_dir'], cache_seconds=config['static_cache_seconds'])
        app.extensions['playhub'] = {
            'catalog': backend,
            'engagement': backend,
            'users': backend,
            'leaderboard': backend,
            'history': backend,
        }
        web_logger.info('Serving static catalog from %s', backend.source)
    else:
        if store is None:
            store = CatalogStore()
            if config.get('seed', True):
                load_sample_data(store)
        app.extensions['playhub_store'] = store
        app.extensions['playhub'] = {
            'catalog': CatalogService(store),
            'engagement': EngagementService(store),
            'users': UserService(store),
            'leaderboard': LeaderboardService(store),
            'history': HistoryService(store),
        }
        web_logger.info('Serving live catalog: %s', store.counts())

    app.register_blueprint(api)
    return app


def main():
    """Main entry point for the web server"""
    parser = argparse.ArgumentParser(description='PlayHub Web API')
    parser.add_argument('--config', default=None, help='Path to JSON config file')
    parser.add_argument('--mode', choices=['dynamic', 'static'], help='Serving mode')
    parser.add_argument('--data-dir', help='Directory of baked JSON files (static mode)')
    parser.add_argument('--host', help='Bind address')
    parser.add_argument('--port', type=int, help='Bind port')
    parser.add_argument('--no-seed', action='store_true', help='Start with an empty catalog')
    parser.add_argument('--debug', action='store_true', help='Enable Flask debug mode')
    args = parser.parse_args()

    config = load_config(args.config)
    if args.mode:
        config['mode'] = args.mode
    if args.data_dir:
        config['data_dir'] = args.data_dir
    if args.host:
        config['host'] = args.host
    if args.port:
        config['port'] = args.port
    if args.no_seed:
        config['seed'] = False

    setup_logging(config['log_level'], log_file=os.path.join('logs', 'playhub_web.log'))

    app = create_app(config)
    web_logger.info('Starting PlayHub %s on %s:%s (%s mode)',
                    __version__, config['host'], config['port'], config['mode'])
    app.run(host=config['host'], port=config['port'], debug=args.debug, threaded=True)


if __name__ == "__main__":
    main()
