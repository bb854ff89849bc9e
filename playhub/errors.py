"""
Exception hierarchy for PlayHub.

All service-level errors derive from PlayHubError so callers can catch broadly
or specifically depending on context.  The web layer maps each class to an
HTTP status code via ``status_code``.
"""


class PlayHubError(Exception):
    """Base class for all PlayHub exceptions."""

    status_code = 500


class NotFoundError(PlayHubError):
    """Raised when a referenced game or user id does not exist."""

    status_code = 404


class InvalidInputError(PlayHubError):
    """Raised on schema or range violations (empty comment, bad rating, ...)."""

    status_code = 400


class ConflictError(PlayHubError):
    """Raised when a username is already taken."""

    status_code = 409


class InvalidCredentialsError(PlayHubError):
    """Raised when a login does not match a stored username/password pair."""

    status_code = 401


class StaticDataError(PlayHubError):
    """Raised when a baked JSON file cannot be fetched or parsed."""

    status_code = 503
