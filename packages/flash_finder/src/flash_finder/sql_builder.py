from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import Model
    from .query import Query


class SQLBuilder:
    """
    Renders a Query into SELECT text with ``?`` placeholders.

    The output is dialect neutral; placeholders are rebound by the dialect
    right before execution.

    Example:
        >>> conn.q().where("name = ?", "mark").order("id desc").limit(5)
        # SELECT users.id, users.name FROM users
        # WHERE name = ? ORDER BY id desc LIMIT 5
    """

    def __init__(self, query: Query, model: type[Model], *add_columns: str):
        self.query = query
        self.model = model
        self.add_columns = [*query.add_columns, *add_columns]

    def build(self) -> tuple[str, list[Any]]:
        if self.query.raw_sql is not None:
            sql, args = self.query.raw_sql
            # Raw statements are still paged when a paginator is attached.
            return self._paginate(sql), list(args)

        table = self.model.table_name()
        sql = f"SELECT {self._columns(table)} FROM {table}"
        args: list[Any] = []

        if self.query.where_clauses:
            fragments = [clause.fragment for clause in self.query.where_clauses]
            if len(fragments) > 1:
                fragments = [f"({fragment})" for fragment in fragments]
            sql = f"{sql} WHERE {' AND '.join(fragments)}"
            for clause in self.query.where_clauses:
                args.extend(clause.arguments)

        if self.query.order_clauses:
            orders = ", ".join(clause.fragment for clause in self.query.order_clauses)
            sql = f"{sql} ORDER BY {orders}"

        if self.query.paginator is not None:
            sql = self._paginate(sql)
        elif self.query.limit_results > 0:
            sql = f"{sql} LIMIT {self.query.limit_results}"

        return sql, args

    def _paginate(self, sql: str) -> str:
        paginator = self.query.paginator
        if paginator is None:
            return sql
        return f"{sql} LIMIT {paginator.per_page} OFFSET {paginator.offset}"

    def _columns(self, table: str) -> str:
        if not self.add_columns:
            return ", ".join(f"{table}.{name}" for name in self.model.column_names())

        # Records are identified by primary key, so it is always selected.
        pk = self.model.primary_key_name()
        selected = {column.rpartition(".")[2] for column in self.add_columns}
        columns = list(self.add_columns)
        if pk not in selected and "*" not in selected:
            columns.insert(0, f"{table}.{pk}")
        return ", ".join(columns)
