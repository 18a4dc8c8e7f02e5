"""Shared utility functions."""
from __future__ import annotations

from datetime import datetime, timezone

LIKE_ESCAPE_CHAR = "\\"


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def like_pattern(term: str) -> str:
    """Build a ``LIKE`` pattern matching *term* as a lower-cased substring.

    ``%`` and ``_`` in *term* are escaped with :data:`LIKE_ESCAPE_CHAR`, so
    the caller must add ``ESCAPE '\\'`` to the SQL clause.
    """
    escaped = (
        term.lower()
        .replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )
    return f"%{escaped}%"
