from __future__ import annotations

from typing import Any, Mapping, Self

from flash_finder.paginator import Paginator

from .base import Clause, QueryBase


class QueryConstruction(QueryBase):
    """
    Fluent API for building up a Query.

    Every method mutates the query in place and returns it, so calls can be
    chained until a finder executes it.
    """

    def where(self, stmt: str, *args: Any) -> Self:
        """
        Add a WHERE condition with ``?`` placeholders.

        Example:
            >>> conn.q().where("name = ?", "mark").where("age > ?", 18)
            # ... WHERE (name = ?) AND (age > ?)
        """
        self.where_clauses.append(Clause(stmt, tuple(args)))
        return self

    def order(self, stmt: str) -> Self:
        """
        Add an ORDER BY fragment.

        Example:
            >>> conn.q().order("name asc").order("id desc")
            # ... ORDER BY name asc, id desc
        """
        self.order_clauses.append(Clause(stmt))
        return self

    def limit(self, count: int) -> Self:
        """
        Example:
            >>> conn.q().limit(10)
            # ... LIMIT 10
        """
        self.limit_results = count
        return self

    def paginate(self, page: int, per_page: int) -> Self:
        """
        Attach a paginator. ``all`` then fills in the totals.

        Example:
            >>> q = conn.q().paginate(2, 10)
            # ... LIMIT 10 OFFSET 10
        """
        self.paginator = Paginator(page=page, per_page=per_page)
        return self

    def paginate_from_params(self, params: Mapping[str, Any]) -> Self:
        """Attach a paginator built from ``page`` / ``per_page`` parameters."""
        self.paginator = Paginator.from_params(params)
        return self

    def raw_query(self, stmt: str, *args: Any) -> Self:
        """
        Run exactly ``stmt`` instead of a generated SELECT.

        Example:
            >>> q = conn.q().raw_query("SELECT * FROM users WHERE id = ?", 1)
            >>> await q.first(User)
        """
        self.raw_sql = (stmt, tuple(args))
        return self

    def select(self, *fields: str) -> Self:
        """
        Restrict the selected columns. Blank names are ignored.

        Example:
            >>> conn.q().select("name", " ", "email")
            # SELECT name, email FROM users
        """
        for f in fields:
            name = f.strip()
            if name:
                self.add_columns.append(name)
        return self

    def eager(self, *fields: str) -> Self:
        """
        Request eager loading of associations after the next finder call.

        Dotted names load nested associations.

        Example:
            >>> await conn.q().eager("books.writers", "profile").first(User)
        """
        self.eager_loading = True
        self.eager_fields = list(fields)
        return self

    def disable_eager(self) -> None:
        self.eager_loading = False
        self.eager_fields = []
