from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Protocol, Sequence, TypeVar

from sqlalchemy import select, text

from .exceptions import RecordNotFoundError
from .logging import log_sql

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import TextClause

    from .models import Model
    from .query import Query

R = TypeVar("R", bound="Model")

_PLACEHOLDER = re.compile(r"\?")
# Colons that SQLAlchemy text() would read as bind parameters ("::" casts excluded).
_BARE_COLON = re.compile(r"(?<![:\\\w]):(?=\w)")


class Dialect(Protocol):
    """
    Execution strategy the finder engine delegates to.
    """

    async def select_one(
        self, store: AsyncSession, model: type[R], query: Query
    ) -> R: ...

    async def select_many(
        self, store: AsyncSession, model: type[R], query: Query
    ) -> list[R]: ...

    async def get(self, store: AsyncSession, sql: str, *args: Any) -> Row | None: ...


class SQLAlchemyDialect:
    """
    Executes finder SQL through an SQLAlchemy ``AsyncSession``.

    Positional ``?`` placeholders are rebound to named ``text()`` parameters,
    so the same statement works on every driver SQLAlchemy supports.
    """

    def rebind(
        self, sql: str, args: Sequence[Any]
    ) -> tuple[TextClause, dict[str, Any]]:
        """
        Turn ``?`` placeholders into named binds.

        Raises:
            ValueError: If the number of placeholders and arguments differ.

        >>> clause, params = SQLAlchemyDialect().rebind("id = ?", [1])
        >>> str(clause), params
        ('id = :arg_0', {'arg_0': 1})
        """
        names: list[str] = []

        def _bind(_: re.Match[str]) -> str:
            names.append(f"arg_{len(names)}")
            return f":{names[-1]}"

        escaped = _BARE_COLON.sub(r"\\:", sql)
        rebound = _PLACEHOLDER.sub(_bind, escaped)
        if len(names) != len(args):
            msg = f"Statement expects {len(names)} arguments, got {len(args)}"
            raise ValueError(msg)
        return text(rebound), dict(zip(names, args))

    async def select_one(self, store: AsyncSession, model: type[R], query: Query) -> R:
        """
        Load the first matching row as a model instance.

        Raises:
            RecordNotFoundError: If no row matches.
        """
        sql, args = query.to_sql(model)
        log_sql(sql, args)
        clause, params = self.rebind(sql, args)
        result = await store.execute(select(model).from_statement(clause), params)
        record = result.scalars().first()
        if record is None:
            msg = f"{model.__name__} matching query does not exist"
            raise RecordNotFoundError(msg)
        return record

    async def select_many(
        self, store: AsyncSession, model: type[R], query: Query
    ) -> list[R]:
        sql, args = query.to_sql(model)
        log_sql(sql, args)
        clause, params = self.rebind(sql, args)
        result = await store.execute(select(model).from_statement(clause), params)
        return list(result.scalars().all())

    async def get(self, store: AsyncSession, sql: str, *args: Any) -> Row | None:
        """Run a raw statement and return its first row."""
        log_sql(sql, args)
        clause, params = self.rebind(sql, args)
        result = await store.execute(clause, params)
        return result.first()
