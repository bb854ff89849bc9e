#!/usr/bin/env python3
"""
Unit tests for the static-site export and the file/HTTP backed catalog.

Run with:
    python -m pytest tests/test_static_site.py
"""
import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import MagicMock

import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from playhub.errors import (
    InvalidCredentialsError, InvalidInputError, NotFoundError, StaticDataError,
)
from playhub.seed import load_sample_data
from playhub.static_site import (
    COMMENTS_DIR, GAMES_FILE, LEADERBOARD_FILE, StaticCatalog,
    atomic_write_json, export_static_site,
)
from playhub.store import CatalogStore


FAKE_GAMES = [
    {'id': 1, 'title': 'Hidden Gem', 'description': 'secret', 'category': 'puzzle',
     'isFeatured': True, 'isNew': False, 'playCount': 900, 'rating': 5, 'hidden': True},
    {'id': 2, 'title': 'Blue Block', 'description': 'Clear the blocks', 'category': 'puzzle',
     'secondaryCategory': 'arcade', 'isFeatured': True, 'isNew': True, 'playCount': 50, 'rating': 4},
    {'id': 3, 'title': 'Drifter', 'description': 'Drift around corners', 'category': 'racing',
     'isFeatured': False, 'isNew': True, 'playCount': 80, 'rating': 4},
]

FAKE_LEADERBOARD = [
    {'id': 1, 'username': 'JediMaster', 'email': 'j@example.com', 'level': 10, 'points': 9845},
    {'id': 2, 'username': 'PixelPro', 'email': 'p@example.com', 'level': 9, 'points': 8732},
]


class TmpDirMixin:
    """Creates and cleans up a temporary directory for each test."""

    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def write(self, rel_path, data):
        atomic_write_json(os.path.join(self.tmp, rel_path), data)


def fake_response(payload=None, status_error=None):
    resp = MagicMock()
    resp.json.return_value = payload
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    return resp


# ===========================================================================
# Export
# ===========================================================================

class TestExport(TmpDirMixin, unittest.TestCase):

    def setUp(self):
        super().setUp()
        self.store = load_sample_data(CatalogStore())

    def test_export_writes_all_files(self):
        counts = export_static_site(self.store, self.tmp, leaderboard_limit=3)
        self.assertEqual(counts['games'], 16)
        self.assertEqual(counts['leaderboard'], 3)
        # Seed comments cover games 1-4.
        self.assertEqual(counts['comment_files'], 4)

        with open(os.path.join(self.tmp, GAMES_FILE)) as f:
            games = json.load(f)
        self.assertEqual(len(games), 16)
        self.assertTrue(games[0]['hidden'])

        with open(os.path.join(self.tmp, LEADERBOARD_FILE)) as f:
            leaderboard = json.load(f)
        self.assertEqual(leaderboard[0]['username'], 'JediMaster')
        self.assertTrue(all('password' not in row for row in leaderboard))

        with open(os.path.join(self.tmp, COMMENTS_DIR, '1.json')) as f:
            comments = json.load(f)
        self.assertEqual(len(comments), 2)

    def test_exported_site_reads_back(self):
        export_static_site(self.store, self.tmp)
        catalog = StaticCatalog(self.tmp)
        self.assertEqual(len(catalog.get_games()), 15)
        self.assertEqual(catalog.get_game(1)['title'], 'Alpha Balls')
        self.assertEqual(catalog.get_top_players(1)[0]['username'], 'JediMaster')
        self.assertEqual(len(catalog.get_comments_by_game(1)), 2)

    def test_atomic_write_leaves_no_temp_files(self):
        path = os.path.join(self.tmp, 'nested', 'out.json')
        atomic_write_json(path, {'a': 1})
        self.assertEqual(os.listdir(os.path.dirname(path)), ['out.json'])


# ===========================================================================
# StaticCatalog over a directory
# ===========================================================================

class TestStaticCatalogDirectory(TmpDirMixin, unittest.TestCase):

    def setUp(self):
        super().setUp()
        self.write(GAMES_FILE, FAKE_GAMES)
        self.write(LEADERBOARD_FILE, FAKE_LEADERBOARD)
        self.write(f'{COMMENTS_DIR}/2.json', [{'id': 1, 'gameId': 2, 'userId': 1, 'content': 'hi'}])
        self.now = 0.0
        self.catalog = StaticCatalog(self.tmp, cache_seconds=60, clock=lambda: self.now)

    def test_listings_skip_hidden(self):
        self.assertEqual([g['id'] for g in self.catalog.get_games()], [2, 3])
        self.assertEqual([g['id'] for g in self.catalog.get_featured_games()], [2])
        self.assertEqual([g['id'] for g in self.catalog.get_new_games()], [2, 3])
        self.assertEqual([g['id'] for g in self.catalog.get_popular_games(5)], [3, 2])

    def test_get_game_finds_hidden(self):
        self.assertEqual(self.catalog.get_game(1)['title'], 'Hidden Gem')
        self.assertIsNone(self.catalog.get_game(99))

    def test_category_and_search(self):
        self.assertEqual([g['id'] for g in self.catalog.get_games_by_category('arcade')], [2])
        self.assertEqual([g['id'] for g in self.catalog.search_games('corner')], [3])
        self.assertEqual([g['id'] for g in self.catalog.browse('puzzle', 'block')], [2])

    def test_categories_counts(self):
        counts = {c['id']: c['count'] for c in self.catalog.get_categories()}
        self.assertEqual(counts['puzzle'], 1)
        self.assertEqual(counts['arcade'], 1)

    def test_comments_missing_file_is_empty(self):
        self.assertEqual(len(self.catalog.get_comments_by_game(2)), 1)
        self.assertEqual(self.catalog.get_comments_by_game(3), [])

    def test_leaderboard_and_users(self):
        rows = self.catalog.get_rankings('username', descending=False, limit=5)
        self.assertEqual([r['rank'] for r in rows], [1, 2])
        self.assertEqual(self.catalog.get_user(2)['username'], 'PixelPro')
        self.assertIsNone(self.catalog.get_user(3))
        self.assertEqual(self.catalog.get_game_history_by_user(1), [])

    def test_games_cached_until_ttl_expires(self):
        self.assertEqual(len(self.catalog.get_games()), 2)
        self.write(GAMES_FILE, FAKE_GAMES + [dict(FAKE_GAMES[2], id=4, title='New')])
        self.now = 30.0
        self.assertEqual(len(self.catalog.get_games()), 2)
        self.now = 61.0
        self.assertEqual(len(self.catalog.get_games()), 3)

    def test_invalidate_forces_reload(self):
        self.catalog.get_games()
        self.write(GAMES_FILE, FAKE_GAMES[:2])
        self.catalog.invalidate()
        self.assertEqual(len(self.catalog.get_games()), 1)

    def test_missing_games_file(self):
        os.remove(os.path.join(self.tmp, GAMES_FILE))
        with self.assertRaises(StaticDataError):
            self.catalog.get_games()

    def test_corrupt_games_file(self):
        with open(os.path.join(self.tmp, GAMES_FILE), 'w') as f:
            f.write('{not json')
        with self.assertRaises(StaticDataError):
            self.catalog.get_games()

    def test_games_file_must_be_list(self):
        self.write(GAMES_FILE, {'games': []})
        with self.assertRaises(StaticDataError):
            self.catalog.get_games()

    def test_mutations_are_noops(self):
        before = self.catalog.get_game(2)
        played = self.catalog.record_play(2, 1, 500)
        self.assertEqual(played['playCount'], before['playCount'])
        rating = self.catalog.submit_rating(2, 1, 5)
        self.assertTrue(rating['static'])
        comment = self.catalog.submit_comment('2', 1, 'nice')
        self.assertTrue(comment['static'])
        self.assertEqual(comment['gameId'], 2)
        self.assertTrue(self.catalog.register('x', 'x@example.com', 'pw')['static'])
        self.assertEqual(len(self.catalog.get_comments_by_game(2)), 1)

    def test_rejected_writes_match_live_validation(self):
        with self.assertRaises(NotFoundError):
            self.catalog.submit_rating(99, 1, 5)
        with self.assertRaises(NotFoundError):
            self.catalog.submit_comment(99, 1, 'nice')
        for bad in (0, 6, 99, 2.5, 'x'):
            with self.assertRaises(InvalidInputError):
                self.catalog.submit_rating(2, 1, bad)
        with self.assertRaises(InvalidInputError):
            self.catalog.submit_comment(2, 1, '   ')
        self.assertEqual(self.catalog.submit_comment(2, 1, '  trimmed ')['content'], 'trimmed')

    def test_profile_summary_for_leaderboard_user(self):
        summary = self.catalog.get_profile_summary(1)
        self.assertEqual(summary['levelProgress'], 84)
        self.assertEqual(summary['pointsToNextLevel'], 155)
        self.assertEqual(summary['gamesPlayed'], 0)
        self.assertIsNone(self.catalog.get_profile_summary(3))

    def test_record_play_unknown_game(self):
        with self.assertRaises(NotFoundError):
            self.catalog.record_play(99)
        with self.assertRaises(InvalidInputError):
            self.catalog.record_play('abc')

    def test_login_unavailable(self):
        with self.assertRaises(InvalidCredentialsError):
            self.catalog.login('JediMaster', 'password')


# ===========================================================================
# StaticCatalog over HTTP
# ===========================================================================

class TestStaticCatalogHttp(unittest.TestCase):

    def setUp(self):
        self.session = MagicMock()
        self.catalog = StaticCatalog('https://cdn.example.com/data/', session=self.session)

    def test_fetches_relative_to_base_url(self):
        self.session.get.return_value = fake_response(FAKE_GAMES)
        self.assertEqual(len(self.catalog.get_games()), 2)
        url = self.session.get.call_args[0][0]
        self.assertEqual(url, 'https://cdn.example.com/data/games.json')

    def test_second_read_uses_cache(self):
        self.session.get.return_value = fake_response(FAKE_GAMES)
        self.catalog.get_games()
        self.catalog.get_featured_games()
        self.assertEqual(self.session.get.call_count, 1)

    def test_http_error_becomes_static_data_error(self):
        self.session.get.return_value = fake_response(
            status_error=requests.HTTPError('503 Server Error'))
        with self.assertRaises(StaticDataError):
            self.catalog.get_games()

    def test_connection_error_becomes_static_data_error(self):
        self.session.get.side_effect = requests.ConnectionError('down')
        with self.assertRaises(StaticDataError):
            self.catalog.get_popular_games()

    def test_missing_comments_file_is_empty(self):
        self.session.get.return_value = fake_response(
            status_error=requests.HTTPError('404 Not Found'))
        self.assertEqual(self.catalog.get_comments_by_game(3), [])


if __name__ == '__main__':
    unittest.main()
