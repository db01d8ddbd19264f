"""
utils/text_utils.py

Purpose: Reply formatting helpers

- Member counts and group labels
- Numbered lists shared by prompts and listings
"""

from typing import Iterable, List

from utils.constants import MEMBER_COUNT, MEMBER_COUNT_PLURAL


def format_member_count(count: int) -> str:
    template = MEMBER_COUNT if count == 1 else MEMBER_COUNT_PLURAL
    return template.format(count=count)


def format_group(name: str, member_count: int) -> str:
    """
    "group0 (2 members)"
    """
    return f"{name} ({format_member_count(member_count)})"


def numbered_lines(items: Iterable[str], start: int = 1) -> List[str]:
    """
    ["a", "b"] -> ["1. a", "2. b"]
    """
    return [f"{index}. {item}" for index, item in enumerate(items, start)]
