"""Tests for wildcard host pattern matching."""

import pytest

from s3filestore.util.pattern import matches, matches_any, split_patterns


@pytest.mark.parametrize(
    "pattern, text, expected",
    [
        ("*.txt", "report.txt", True),
        ("a?c", "abc", True),
        ("abc", "abd", False),
        ("abc", "abc", True),
        ("*", "", True),
        ("*", "anything", True),
        ("?", "", False),
        ("a*c", "ac", True),
        ("a*c", "abbbc", True),
        ("a*c", "abbbd", False),
        ("*.example.com", "s3.example.com", True),
        ("*.example.com", "example.com", False),
        ("s3.?.com", "s3.a.com", True),
        ("abc", "abcd", False),
        ("ABC", "abc", False),
    ],
)
def test_matches(pattern, text, expected):
    assert matches(pattern, text) is expected


def test_regex_characters_are_literal():
    assert matches("a.c", "a.c") is True
    assert matches("a.c", "abc") is False
    assert matches("[ab]", "[ab]") is True
    assert matches("[ab]", "a") is False


def test_matches_any_empty_list():
    assert matches_any([], "host") is False


def test_matches_any_none():
    assert matches_any(None, "host") is False


def test_matches_any_star():
    assert matches_any(["*"], "anything") is True


def test_matches_any_one_of_many():
    patterns = ["*.internal", "localhost", "10.0.0.?"]

    assert matches_any(patterns, "minio.internal") is True
    assert matches_any(patterns, "10.0.0.7") is True
    assert matches_any(patterns, "s3.amazonaws.com") is False


def test_split_patterns():
    assert split_patterns(" localhost, *.internal ,,") == ["localhost", "*.internal"]
    assert split_patterns("") == []
    assert split_patterns(None) == []
