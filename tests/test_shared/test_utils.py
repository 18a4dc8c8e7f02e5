"""Tests for shared utility functions."""
from __future__ import annotations

from datetime import datetime

from src.shared.utils import like_pattern, now_iso


def test_now_iso_is_parseable_utc():
    parsed = datetime.fromisoformat(now_iso())
    assert parsed.utcoffset().total_seconds() == 0


def test_like_pattern_lowercases_and_wraps():
    assert like_pattern("Struts") == "%struts%"


def test_like_pattern_escapes_wildcards():
    assert like_pattern("100%_done") == "%100\\%\\_done%"


def test_like_pattern_escapes_escape_char():
    assert like_pattern("a\\b") == "%a\\\\b%"
