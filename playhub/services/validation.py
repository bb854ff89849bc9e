"""Input checks shared by the services.

Each helper returns the cleaned value or raises
:class:`~playhub.errors.InvalidInputError`.
"""
from typing import Any, Optional

from ..errors import InvalidInputError


def require_int(value: Any, name: str, minimum: Optional[int] = None,
                maximum: Optional[int] = None) -> int:
    """Return *value* as an ``int`` within ``[minimum, maximum]``.

    Booleans and floats with a fractional part are rejected; integral
    floats (``4.0``) and numeric strings (``"4"``) are accepted since both
    show up in JSON and query strings.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidInputError(f"{name} must be an integer")
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidInputError(f"{name} must be an integer") from None
    elif not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer")

    if minimum is not None and value < minimum:
        raise InvalidInputError(f"{name} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise InvalidInputError(f"{name} must be at most {maximum}")
    return value


def require_id(value: Any, name: str) -> int:
    """Return *value* as a positive entity id."""
    return require_int(value, name, minimum=1)


def require_text(value: Any, name: str) -> str:
    """Return *value* stripped of surrounding whitespace; must be non-empty."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} must not be empty")
    return value.strip()
