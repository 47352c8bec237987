"""
Rewrites a generated SELECT into COUNT / EXISTS form.

The inner statement may come from a raw query and already carry pagination.
A trailing limit on the inner query would make the aggregate count only one
page, so it is removed first. Only the grammar below is recognised, anchored
at the end of the statement and case-insensitive::

    LIMIT <digits> [OFFSET <digits>] [whitespace]

Other dialect forms (``FETCH FIRST n ROWS ONLY``, ``TOP n``) pass through.
"""

import re

from pydantic import BaseModel, Field

# The optional OFFSET group makes the longest trailing form win.
_TRAILING_LIMIT = re.compile(
    r"\blimit\s+[0-9]+(?:\s+offset\s+[0-9]+)?\s*$",
    re.IGNORECASE,
)


class RowCount(BaseModel):
    """Single-column result of a COUNT query."""

    count: int = Field(alias="row_count")


def strip_trailing_limit(sql: str) -> str:
    """
    Remove a trailing ``LIMIT n`` or ``LIMIT n OFFSET m`` clause.

    >>> strip_trailing_limit("SELECT * FROM users LIMIT 10 OFFSET 20")
    'SELECT * FROM users '
    >>> strip_trailing_limit("SELECT * FROM users")
    'SELECT * FROM users'
    """
    match = _TRAILING_LIMIT.search(sql)
    if match is None:
        return sql
    return sql[: match.start()]


def count_sql(sql: str, field: str = "*") -> str:
    """
    >>> count_sql("SELECT id FROM users LIMIT 1")
    'SELECT COUNT(*) AS row_count FROM (SELECT id FROM users ) a'
    """
    return f"SELECT COUNT({field}) AS row_count FROM ({strip_trailing_limit(sql)}) a"


def exists_sql(sql: str) -> str:
    """
    >>> exists_sql("SELECT id FROM users")
    'SELECT EXISTS (SELECT id FROM users)'
    """
    return f"SELECT EXISTS ({strip_trailing_limit(sql)})"
