"""Sample catalog loaded into a fresh store on startup (and in demo/CLI runs)."""
import datetime
import logging
from typing import Dict, List

from .services.engagement_service import EngagementService
from .services.user_service import hash_password
from .store import CatalogStore

logger = logging.getLogger('playhub.seed')

SAMPLE_PASSWORD = 'password'

SAMPLE_USERS: List[Dict] = [
    {'username': 'JediMaster', 'email': 'jedi@example.com', 'avatar': 'JD', 'points': 9845},
    {'username': 'PixelPro', 'email': 'pixel@example.com', 'avatar': 'PP', 'points': 8732},
    {'username': 'GameWizard', 'email': 'wizard@example.com', 'avatar': 'GW', 'points': 7914},
    {'username': 'NinjaSlayer', 'email': 'ninja@example.com', 'avatar': 'NS', 'points': 7156},
    {'username': 'RocketPower', 'email': 'rocket@example.com', 'avatar': 'RP', 'points': 6873},
]

SAMPLE_GAMES: List[Dict] = [
    {"title": "Alpha Balls", "description": "Roll, bounce, and match balls to form words in this exciting vocabulary game",
     "category": "adventure", "secondaryCategory": "arcade", "thumbnailUrl": "/games/AlphaBalls/HTML5/icons/icon-512.png",
     "isFeatured": True, "isNew": True, "rating": 5, "playCount": 3032, "hidden": True},
    {"title": "Basket Slide", "description": "Slide and shoot baskets in this fast-paced basketball challenge",
     "category": "action", "secondaryCategory": "casual", "thumbnailUrl": "/games/BasketSlide/HTML5/icons/icon-512.png",
     "isFeatured": True, "isNew": True, "rating": 5, "playCount": 1351},
    {"title": "Blocks 8", "description": "Arrange blocks in rows and columns to clear the board and score points",
     "category": "sports", "secondaryCategory": "racing", "thumbnailUrl": "/games/Blocks8/HTML5/icons/icon-256.png",
     "rating": 5, "playCount": 1500},
    {"title": "Blocky 360", "description": "Rotate blocks in a 360-degree environment to build structures",
     "category": "racing", "secondaryCategory": "puzzle", "thumbnailUrl": "/games/Blocky360/HTML5/icons/icon-256.png",
     "isNew": True, "rating": 5, "playCount": 2259},
    {"title": "Blue Block", "description": "Clear the blue blocks while avoiding obstacles in this puzzle game",
     "category": "puzzle", "secondaryCategory": "educational", "thumbnailUrl": "/games/BlueBlock/HTML5/icons/icon-256.png",
     "isNew": True, "rating": 4, "playCount": 5540},
    {"title": "Bounce", "description": "Bounce your way through challenging levels with physics-based gameplay",
     "category": "action", "secondaryCategory": "arcade", "thumbnailUrl": "/games/Bounce/HTML5/icon-256.png",
     "isFeatured": True, "rating": 4, "playCount": 5298},
    {"title": "Bridges", "description": "Build bridges to connect islands and solve tricky puzzles",
     "category": "strategy", "secondaryCategory": "board", "thumbnailUrl": "/games/Bridges/HTML5/icons/icon-512.png",
     "isFeatured": True, "rating": 4, "playCount": 3496},
    {"title": "Cards 2048", "description": "Combine cards with the same number to reach 2048 in this addictive card game",
     "category": "card", "secondaryCategory": "board", "thumbnailUrl": "/games/Cards2048/HTML5/icons/icon-512.png",
     "isFeatured": True, "rating": 4, "playCount": 1255},
    {"title": "Colored Bricks", "description": "Enjoy this challenging casual game and test your skills!",
     "category": "puzzle", "secondaryCategory": "adventure", "thumbnailUrl": "/games/ColoredBricks/HTML5/icons/icon-512.png",
     "isFeatured": True, "rating": 4, "playCount": 5737},
    {"title": "Connect Me", "description": "Experience this entertaining multiplayer game and test your skills!",
     "category": "puzzle", "secondaryCategory": "board", "thumbnailUrl": "/games/ConnectMe/HTML5/icons/icon-512.png",
     "rating": 5, "playCount": 3568},
    {"title": "Cross Path", "description": "Experience this entertaining racing game and test your skills!",
     "category": "racing", "secondaryCategory": "arcade", "thumbnailUrl": "/games/CrossPath/HTML5/icons/icon-256.png",
     "rating": 4, "playCount": 3929},
    {"title": "Donut Box", "description": "Play this addictive arcade game and test your skills!",
     "category": "multiplayer", "secondaryCategory": "fast-paced", "thumbnailUrl": "/games/DonutBox/HTML5/icons/icon-512.png",
     "isNew": True, "rating": 4, "playCount": 2986},
    {"title": "Drifter", "description": "Drift around corners and chase the best lap time",
     "category": "adventure", "secondaryCategory": "fast-paced", "thumbnailUrl": "/games/Drifter/HTML5/icons/icon-512.png",
     "rating": 4, "playCount": 5255},
    {"title": "Happy Connect", "description": "Connect matching tiles before the timer runs out",
     "category": "arcade", "secondaryCategory": "puzzle", "thumbnailUrl": "/games/HappyConnect/HTML5/icons/icon-512.png",
     "isFeatured": True, "rating": 4, "playCount": 4281},
    {"title": "Knots", "description": "Untangle the knots in as few moves as possible",
     "category": "multiplayer", "secondaryCategory": "puzzle", "thumbnailUrl": "/games/Knots/HTML5/icons/icon-512.png",
     "isFeatured": True, "rating": 4, "playCount": 5267},
    {"title": "Speed Racer", "description": "Dodge traffic and race down the highway as fast as you can",
     "category": "racing", "secondaryCategory": "fast-paced", "thumbnailUrl": "/games/speed-racer/thumbnail.png",
     "isFeatured": True, "isNew": True, "rating": 0, "playCount": 0},
]

SAMPLE_COMMENTS: List[Dict] = [
    {'gameId': 1, 'userId': 1, 'content': 'This game is awesome! I love the speed and graphics.'},
    {'gameId': 1, 'userId': 2, 'content': 'Great gameplay but could use more levels.'},
    {'gameId': 2, 'userId': 3, 'content': 'Very challenging puzzles, kept me entertained for hours.'},
    {'gameId': 3, 'userId': 4, 'content': "The storyline is amazing, can't wait for more content."},
    {'gameId': 4, 'userId': 5, 'content': 'Best multiplayer game on the platform!'},
]

SAMPLE_RATINGS: List[Dict] = [
    {'gameId': 1, 'userId': 1, 'rating': 5},
    {'gameId': 1, 'userId': 2, 'rating': 4},
    {'gameId': 2, 'userId': 3, 'rating': 5},
    {'gameId': 3, 'userId': 4, 'rating': 5},
    {'gameId': 4, 'userId': 5, 'rating': 5},
]

# (gameId, userId, score, hours ago)
SAMPLE_HISTORY = [
    (1, 1, 5280, 2),
    (2, 1, 12450, 24),
    (3, 2, 8760, 3),
    (4, 3, 4500, 5),
    (1, 4, 6200, 12),
]


def load_sample_data(store: CatalogStore) -> CatalogStore:
    """Populate *store* with the sample catalog and return it.

    Ratings go through :class:`EngagementService` so seeded games end up
    with consistent averages; history rows are backdated and do not award
    points (the sample point totals already include them).
    """
    for user in SAMPLE_USERS:
        store.create_user(dict(user, password=hash_password(SAMPLE_PASSWORD)))
    for game in SAMPLE_GAMES:
        store.create_game(game)
    for comment in SAMPLE_COMMENTS:
        store.create_comment(comment)

    engagement = EngagementService(store)
    for rating in SAMPLE_RATINGS:
        engagement.submit_rating(rating['gameId'], rating['userId'], rating['rating'])

    now = datetime.datetime.now(datetime.timezone.utc)
    for game_id, user_id, score, hours_ago in SAMPLE_HISTORY:
        store.create_game_history({
            'gameId': game_id,
            'userId': user_id,
            'score': score,
            'playedAt': now - datetime.timedelta(hours=hours_ago),
        })

    logger.info('Loaded sample data: %s', store.counts())
    return store
