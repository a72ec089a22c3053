"""
Name conversion helpers for generated declarations.
"""

import keyword
import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def to_snake_case(name: str) -> str:
    """
    Convert camelCase to snake_case.

    Examples:
        gameStatus -> game_status
        HTTPResponse -> http_response
        getHTTPResponseCode -> get_http_response_code
    """
    result = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    result = _CAMEL_BOUNDARY.sub(r"\1_\2", result)
    return result.lower()


def to_upper_snake_case(name: str) -> str:
    """Convert camelCase to UPPER_SNAKE_CASE (e.g. createPlayer -> CREATE_PLAYER)."""
    return to_snake_case(name).upper()


def safe_identifier(name: str) -> str:
    """Suffix Python keywords with an underscore (``from`` -> ``from_``)."""
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def is_identifier(name: str) -> bool:
    """Return True if name is a plain (non-dotted) Python identifier."""
    return bool(_IDENTIFIER.match(name)) and not keyword.iskeyword(name)
