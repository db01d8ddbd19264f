"""
utils/validation_utils.py

Purpose: Input validation

- Display name rules
- Splitting confirm selections into tokens
- Numeric and number-plus-letter selection parsing
"""

import re
from typing import List, Optional, Tuple

from app.core.exceptions import ValidationError

INDEX_PATTERN = re.compile(r"^[0-9]+$")
DEFERRED_TOKEN_PATTERN = re.compile(r"^([0-9]+)([a-z])$")
SELECTION_SEPARATOR = re.compile(r"[,\s]+")


def validate_name(name: str, usage: str, max_length: int = 20) -> str:
    """
    Validates a display name.

    Args:
        name: Everything after the "name" command word
        usage: Usage line returned when the name is empty
        max_length: Maximum allowed characters

    Returns:
        The trimmed name

    Raises:
        ValidationError: With a reply-ready message
    """
    name = (name or "").strip()

    if not name:
        raise ValidationError(usage)

    if len(name) > max_length:
        raise ValidationError(
            f"That name is {len(name)} characters long.\n"
            f"Please shorten it to {max_length} characters or less."
        )

    return name


def split_selections(raw: str) -> List[str]:
    """
    Splits a confirm argument like "1, 3,4" into tokens.
    Commas and whitespace both separate; empty pieces are dropped.
    """
    if not raw:
        return []

    return [token for token in SELECTION_SEPARATOR.split(raw.strip()) if token]


def parse_index(token: str) -> Optional[int]:
    """
    Parses a 1-based list position.

    Returns:
        The position as an int, or None if the token is not all digits
    """
    if not INDEX_PATTERN.match(token):
        return None
    return int(token)


def parse_deferred_token(token: str) -> Optional[Tuple[int, int]]:
    """
    Parses a deferred contact choice like "2b".

    Returns:
        (1-based contact position, 0-based option index), or None if the
        token is not digits followed by one lowercase letter
    """
    match = DEFERRED_TOKEN_PATTERN.match(token)
    if not match:
        return None

    position = int(match.group(1))
    option = ord(match.group(2)) - ord("a")
    return position, option


def option_letter(index: int) -> str:
    """0 -> "a", 1 -> "b", ..."""
    return chr(ord("a") + index)
