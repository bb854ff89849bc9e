"""
openapi_spec.py: PlayHub OpenAPI 3.0 document builder.

Returns a Python dict (compatible with ``json.dumps``) that describes every
REST endpoint exposed by ``playhub_web.py``.

Usage (from playhub_web.py)::

    from openapi_spec import build_spec
    spec = build_spec(server_url="http://localhost:5000")
"""

from typing import Any, Dict, List

from playhub import __version__


def _ref(name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _array(name: str) -> Dict[str, Any]:
    return {"type": "array", "items": _ref(name)}


def _resp(description: str, schema: Dict = None) -> Dict:
    content: Dict[str, Any] = {}
    if schema:
        content = {"application/json": {"schema": schema}}
    r: Dict[str, Any] = {"description": description}
    if content:
        r["content"] = content
    return r


def _json_resp(description: str, schema: Dict = None) -> Dict:
    if schema is None:
        schema = {"type": "object"}
    return _resp(description, schema)


def _error(description: str) -> Dict:
    return _json_resp(description, _ref("Error"))


def _path_id(name: str) -> Dict[str, Any]:
    return {"name": name, "in": "path", "required": True,
            "schema": {"type": "integer", "minimum": 1}}


def _query(name: str, schema: Dict, description: str = "") -> Dict[str, Any]:
    p: Dict[str, Any] = {"name": name, "in": "query", "required": False, "schema": schema}
    if description:
        p["description"] = description
    return p


def _body(required: List[str], properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "required": True,
        "content": {"application/json": {"schema": {
            "type": "object",
            "required": required,
            "properties": properties,
        }}},
    }


_LIMIT = {"type": "integer", "minimum": 0}
_TIMESTAMP = {"type": "string", "format": "date-time"}


def build_spec(server_url: str = "/") -> Dict[str, Any]:
    """Return the full OpenAPI 3.0 specification dict."""

    spec: Dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {
            "title": "PlayHub Casual Games Catalog API",
            "version": __version__,
            "description": (
                "REST API for PlayHub, a catalog of embedded HTML5 games with "
                "user accounts, comments, ratings, play history and a points "
                "leaderboard.\n\n"
                "In static mode write endpoints accept requests but change nothing."
            ),
            "license": {"name": "MIT"},
        },
        "servers": [{"url": server_url, "description": "PlayHub server"}],
        "tags": [
            {"name": "games",       "description": "Catalog listings and filters"},
            {"name": "engagement",  "description": "Plays, ratings and comments"},
            {"name": "users",       "description": "Accounts, history and leaderboard"},
            {"name": "auth",        "description": "Session login"},
            {"name": "docs",        "description": "API documentation"},
        ],
        "components": {
            "schemas": {
                "Error": {
                    "type": "object",
                    "properties": {"error": {"type": "string"}},
                    "required": ["error"],
                },
                "Game": {
                    "type": "object",
                    "properties": {
                        "id":                {"type": "integer", "example": 2},
                        "title":             {"type": "string", "example": "Basket Slide"},
                        "description":       {"type": "string"},
                        "category":          {"type": "string", "example": "action"},
                        "secondaryCategory": {"type": "string", "nullable": True},
                        "thumbnailUrl":      {"type": "string"},
                        "isFeatured":        {"type": "boolean"},
                        "isNew":             {"type": "boolean"},
                        "rating":            {"type": "integer", "minimum": 0, "maximum": 5},
                        "playCount":         {"type": "integer", "minimum": 0},
                        "hidden":            {"type": "boolean"},
                        "createdAt":         _TIMESTAMP,
                    },
                },
                "User": {
                    "type": "object",
                    "description": "Never includes the password.",
                    "properties": {
                        "id":        {"type": "integer"},
                        "username":  {"type": "string"},
                        "email":     {"type": "string"},
                        "avatar":    {"type": "string", "nullable": True},
                        "level":     {"type": "integer", "minimum": 1},
                        "points":    {"type": "integer", "minimum": 0},
                        "createdAt": _TIMESTAMP,
                        "rank":      {"type": "integer", "description": "Leaderboard rows only"},
                    },
                },
                "Comment": {
                    "type": "object",
                    "properties": {
                        "id":        {"type": "integer"},
                        "gameId":    {"type": "integer"},
                        "userId":    {"type": "integer"},
                        "content":   {"type": "string"},
                        "createdAt": _TIMESTAMP,
                    },
                },
                "Rating": {
                    "type": "object",
                    "properties": {
                        "id":        {"type": "integer"},
                        "gameId":    {"type": "integer"},
                        "userId":    {"type": "integer"},
                        "rating":    {"type": "integer", "minimum": 1, "maximum": 5},
                        "createdAt": _TIMESTAMP,
                    },
                },
                "GameHistory": {
                    "type": "object",
                    "properties": {
                        "id":       {"type": "integer"},
                        "gameId":   {"type": "integer"},
                        "userId":   {"type": "integer"},
                        "score":    {"type": "integer", "minimum": 0},
                        "playedAt": _TIMESTAMP,
                    },
                },
                "ProfileSummary": {
                    "type": "object",
                    "properties": {
                        "userId":            {"type": "integer"},
                        "level":             {"type": "integer", "minimum": 1},
                        "points":            {"type": "integer", "minimum": 0},
                        "nextLevel":         {"type": "integer"},
                        "levelProgress":     {"type": "integer", "minimum": 0, "maximum": 100},
                        "pointsToNextLevel": {"type": "integer", "minimum": 0},
                        "gamesPlayed":       {"type": "integer", "minimum": 0},
                        "averageScore":      {"type": "integer", "nullable": True},
                        "highestScore":      {"type": "integer", "nullable": True},
                    },
                },
                "Category": {
                    "type": "object",
                    "properties": {
                        "id":    {"type": "string", "example": "puzzle"},
                        "name":  {"type": "string", "example": "Puzzle"},
                        "icon":  {"type": "string"},
                        "color": {"type": "string"},
                        "count": {"type": "integer"},
                    },
                },
            },
            "securitySchemes": {
                "sessionCookie": {
                    "type": "apiKey",
                    "in": "cookie",
                    "name": "session",
                    "description": "Session cookie obtained from POST /api/auth/login",
                }
            },
        },
        "paths": _build_paths(),
    }
    return spec


def _build_paths() -> Dict[str, Any]:
    paths: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------
    paths["/api/games"] = {
        "get": {
            "tags": ["games"],
            "summary": "List visible games",
            "parameters": [
                _query("category", {"type": "string"}, "Primary or secondary tag; 'all' = any"),
                _query("search", {"type": "string"}, "Substring of title or description"),
            ],
            "responses": {"200": _json_resp("Games", _array("Game"))},
        }
    }
    for suffix, summary in (("featured", "Featured games"), ("new", "New games")):
        paths[f"/api/games/{suffix}"] = {
            "get": {
                "tags": ["games"],
                "summary": summary,
                "responses": {"200": _json_resp("Games", _array("Game"))},
            }
        }
    paths["/api/games/popular"] = {
        "get": {
            "tags": ["games"],
            "summary": "Most played games",
            "parameters": [_query("limit", _LIMIT, "Default 5")],
            "responses": {"200": _json_resp("Games sorted by playCount",
                                            _array("Game")),
                          "400": _error("Bad limit")},
        }
    }
    paths["/api/games/category/{category}"] = {
        "get": {
            "tags": ["games"],
            "summary": "Games tagged with a category",
            "parameters": [{"name": "category", "in": "path", "required": True,
                            "schema": {"type": "string"}}],
            "responses": {"200": _json_resp("Games", _array("Game"))},
        }
    }
    paths["/api/games/{gameId}"] = {
        "get": {
            "tags": ["games"],
            "summary": "Get one game (hidden games included)",
            "parameters": [_path_id("gameId")],
            "responses": {"200": _json_resp("Game", _ref("Game")),
                          "404": _error("Game not found")},
        }
    }
    paths["/api/games/{gameId}/similar"] = {
        "get": {
            "tags": ["games"],
            "summary": "Random games sharing the primary category",
            "parameters": [_path_id("gameId"), _query("limit", _LIMIT, "Default 3")],
            "responses": {"200": _json_resp("Games", _array("Game"))},
        }
    }
    paths["/api/categories"] = {
        "get": {
            "tags": ["games"],
            "summary": "Category catalog with live counts",
            "responses": {"200": _json_resp("Categories", _array("Category"))},
        }
    }

    # ------------------------------------------------------------------
    # Engagement
    # ------------------------------------------------------------------
    paths["/api/games/{gameId}/play"] = {
        "post": {
            "tags": ["engagement"],
            "summary": "Record a play",
            "description": ("Increments playCount. With a userId (or a logged-in "
                            "session) a history row is added and score // 100 "
                            "points are awarded."),
            "parameters": [_path_id("gameId")],
            "requestBody": {"required": False, "content": {"application/json": {"schema": {
                "type": "object",
                "properties": {"userId": {"type": "integer"},
                               "score": {"type": "integer", "minimum": 0}},
            }}}},
            "responses": {"200": _json_resp("Updated game", _ref("Game")),
                          "400": _error("Invalid score or id"),
                          "404": _error("Game not found")},
        }
    }
    paths["/api/games/{gameId}/comments"] = {
        "get": {
            "tags": ["engagement"],
            "summary": "Comments, newest first",
            "parameters": [_path_id("gameId")],
            "responses": {"200": _json_resp("Comments", _array("Comment"))},
        },
        "post": {
            "tags": ["engagement"],
            "summary": "Post a comment",
            "parameters": [_path_id("gameId")],
            "requestBody": _body(["userId", "content"], {
                "userId": {"type": "integer"},
                "content": {"type": "string", "minLength": 1},
            }),
            "responses": {"201": _json_resp("Created", _ref("Comment")),
                          "400": _error("Empty content"),
                          "404": _error("Game or user not found")},
        },
    }
    rate = {
        "tags": ["engagement"],
        "summary": "Rate a game (one rating per user; re-rating overwrites)",
        "parameters": [_path_id("gameId")],
        "requestBody": _body(["userId", "rating"], {
            "userId": {"type": "integer"},
            "rating": {"type": "integer", "minimum": 1, "maximum": 5},
        }),
        "responses": {"201": _json_resp("Stored", _ref("Rating")),
                      "400": _error("Rating out of range"),
                      "404": _error("Game or user not found")},
    }
    paths["/api/games/{gameId}/rate"] = {"post": rate}
    paths["/api/games/{gameId}/ratings"] = {
        "get": {
            "tags": ["engagement"],
            "summary": "Ratings for a game",
            "parameters": [_path_id("gameId"),
                           _query("userId", {"type": "integer"}, "Only this user's rating")],
            "responses": {"200": _json_resp("Ratings", _array("Rating"))},
        },
        "post": rate,
    }

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    paths["/api/users"] = {
        "post": {
            "tags": ["users"],
            "summary": "Register a user",
            "requestBody": _body(["username", "email", "password"], {
                "username": {"type": "string"},
                "email":    {"type": "string"},
                "password": {"type": "string", "format": "password"},
                "avatar":   {"type": "string"},
            }),
            "responses": {"201": _json_resp("User created", _ref("User")),
                          "400": _error("Validation error"),
                          "409": _error("Username already taken")},
        }
    }
    paths["/api/users/{userId}"] = {
        "get": {
            "tags": ["users"],
            "summary": "Get a user",
            "parameters": [_path_id("userId")],
            "responses": {"200": _json_resp("User", _ref("User")),
                          "404": _error("User not found")},
        }
    }
    paths["/api/users/{userId}/history"] = {
        "get": {
            "tags": ["users"],
            "summary": "Play history, newest first",
            "parameters": [_path_id("userId")],
            "responses": {"200": _json_resp("History", _array("GameHistory")),
                          "404": _error("User not found")},
        }
    }
    paths["/api/users/{userId}/profile"] = {
        "get": {
            "tags": ["users"],
            "summary": "Level progress and score stats",
            "parameters": [_path_id("userId")],
            "responses": {"200": _json_resp("Profile summary", _ref("ProfileSummary")),
                          "404": _error("User not found")},
        }
    }
    paths["/api/leaderboard"] = {
        "get": {
            "tags": ["users"],
            "summary": "Top players",
            "parameters": [
                _query("limit", _LIMIT, "Default 10"),
                _query("sort", {"type": "string", "enum": ["points", "level", "username"]}),
                _query("order", {"type": "string", "enum": ["asc", "desc"]}),
            ],
            "responses": {"200": _json_resp("Users", _array("User")),
                          "400": _error("Bad sort or limit")},
        }
    }

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    paths["/api/auth/login"] = {
        "post": {
            "tags": ["auth"],
            "summary": "Log in",
            "description": "Verifies username + password and sets a session cookie.",
            "requestBody": _body(["username", "password"], {
                "username": {"type": "string"},
                "password": {"type": "string", "format": "password"},
            }),
            "responses": {"200": _json_resp("Logged in", _ref("User")),
                          "401": _error("Invalid credentials")},
        }
    }
    paths["/api/auth/logout"] = {
        "post": {
            "tags": ["auth"],
            "summary": "Log out",
            "security": [{"sessionCookie": []}],
            "responses": {"200": _json_resp("Logged out")},
        }
    }
    paths["/api/auth/current"] = {
        "get": {
            "tags": ["auth"],
            "summary": "Current user",
            "security": [{"sessionCookie": []}],
            "responses": {"200": _json_resp("User", _ref("User")),
                          "401": _error("Not logged in")},
        }
    }

    # ------------------------------------------------------------------
    # Status / docs
    # ------------------------------------------------------------------
    paths["/api/status"] = {
        "get": {
            "tags": ["docs"],
            "summary": "Server mode and collection sizes",
            "responses": {"200": _json_resp("Status object")},
        }
    }
    paths["/api/openapi.json"] = {
        "get": {
            "tags": ["docs"],
            "summary": "This document",
            "responses": {"200": _json_resp("OpenAPI 3.0 document")},
        }
    }
    return paths
