"""Shell-style wildcard matching for host names.

Only two wildcards are understood:
- ``*`` matches zero or more characters
- ``?`` matches exactly one character

Every other character (including ``[``, ``]`` and ``.``) matches itself, so
this is deliberately narrower than :mod:`fnmatch`. The matcher is used to
decide whether the storage endpoint is listed in the no-proxy host list.
"""

import re
from typing import Iterable, List, Optional


def _to_regex(pattern: str) -> str:
    """Translate a wildcard pattern into a regular expression."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


def matches(pattern: str, text: str) -> bool:
    """Check whether ``text`` matches ``pattern`` as a whole.

    Args:
        pattern: Wildcard pattern (``*`` and ``?`` supported)
        text: Text to test

    Returns:
        True if the whole text matches the pattern

    Example:
        >>> matches("*.txt", "report.txt")
        True
        >>> matches("a?c", "abc")
        True
        >>> matches("abc", "abd")
        False
    """
    return re.fullmatch(_to_regex(pattern), text, re.DOTALL) is not None


def matches_any(patterns: Optional[Iterable[str]], text: str) -> bool:
    """Check whether ``text`` matches at least one of ``patterns``.

    An empty or missing pattern list never matches.
    """
    if not patterns:
        return False
    return any(matches(pattern, text) for pattern in patterns)


def split_patterns(value: Optional[str]) -> List[str]:
    """Split a comma-separated pattern list, dropping blank entries."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
