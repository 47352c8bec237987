from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from flash_finder.sql_builder import SQLBuilder

if TYPE_CHECKING:
    from flash_finder.connection import Connection
    from flash_finder.models import Model
    from flash_finder.paginator import Paginator


@dataclass(frozen=True)
class Clause:
    """A SQL fragment with its positional arguments."""

    fragment: str
    arguments: tuple[Any, ...] = field(default_factory=tuple)


class QueryBase:
    """
    State shared by every Query layer.

    A Query accumulates WHERE, ORDER and LIMIT clauses, selected columns,
    pagination and eager-loading requests. It holds a non-owning reference
    to the Connection it runs on.
    """

    def __init__(self, connection: Connection):
        self.connection = connection
        self.raw_sql: tuple[str, tuple[Any, ...]] | None = None
        self.where_clauses: list[Clause] = []
        self.order_clauses: list[Clause] = []
        self.limit_results: int = 0
        self.add_columns: list[str] = []
        self.paginator: Paginator | None = None
        self.eager_loading: bool = False
        self.eager_fields: list[str] = []

    def _clone(self) -> Any:
        """
        Return an independent copy of the current query.

        Lists and the paginator are copied so changes on the copy never reach
        the original.
        """
        clone = self.__class__(self.connection)
        clone.raw_sql = self.raw_sql
        clone.where_clauses = list(self.where_clauses)
        clone.order_clauses = list(self.order_clauses)
        clone.limit_results = self.limit_results
        clone.add_columns = list(self.add_columns)
        clone.paginator = self.paginator.model_copy() if self.paginator else None
        clone.eager_loading = self.eager_loading
        clone.eager_fields = list(self.eager_fields)
        return clone

    def to_sql(self, model: type[Model], *add_columns: str) -> tuple[str, list[Any]]:
        """
        Materialize the query into SQL text and positional arguments.

        Example:
            >>> conn.q().where("name = ?", "mark").to_sql(User)
            ('SELECT users.id, users.name FROM users WHERE name = ?', ['mark'])
        """
        return SQLBuilder(self, model, *add_columns).build()
