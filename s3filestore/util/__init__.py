"""
Helpers for storage key generation and host pattern matching.
"""

from .path_template import DEFAULT_PATTERN, resolve
from .pattern import matches, matches_any, split_patterns

__all__ = ["DEFAULT_PATTERN", "resolve", "matches", "matches_any", "split_patterns"]
