from __future__ import annotations

from .base import Clause
from .finders import QueryFinders, coerce_id


class Query(QueryFinders):
    """
    Mutable query builder bound to a Connection.

    A Query collects WHERE, ORDER, LIMIT and pagination state through chained
    calls and executes through one of its terminal finders:
        - find()
        - first() / last()
        - all()
        - exists()
        - count() / count_by_field()

    Notes:
        - Builder methods mutate the query and return it.
        - ``count`` and ``exists`` work on a copy; the query itself is left
          untouched and can still be used for ``all``.
        - Eager loading requested with ``eager()`` is consumed by the next
          finder call.
        - A Query is not meant to be shared between concurrent tasks.

    Examples:
        >>> q = conn.where("status = ?", "published").order("id desc")
        >>> total = await q.count(Article)
        >>> articles = await q.paginate(1, 20).all(Article)
    """


__all__ = ["Clause", "Query", "coerce_id"]
