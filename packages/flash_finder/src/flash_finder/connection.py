from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncGenerator, Mapping, TypeVar

from .dialect import SQLAlchemyDialect
from .logging import get_logger
from .query import Query

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from .dialect import Dialect
    from .models import Model

R = TypeVar("R", bound="Model")

logger = get_logger(__name__)


class Connection:
    """
    Execution context pairing a store handle with a dialect.

    Every builder method opens a fresh Query, and every finder runs on a
    fresh Query, so a Connection can be shared by many queries. The
    connection itself is never changed by a finder except for the
    ``elapsed`` counter.

    Args:
        store: Active AsyncSession used to run statements.
        dialect: Execution strategy, SQLAlchemyDialect by default.

    Examples:
        >>> conn = Connection(session)
        >>> user = await conn.find(User, 1)
        >>> users = await conn.where("name = ?", "mark").eager("books").all(User)
    """

    def __init__(self, store: AsyncSession, dialect: Dialect | None = None):
        self.store = store
        self.dialect: Dialect = dialect or SQLAlchemyDialect()
        # Seconds spent inside finder operations.
        self.elapsed: float = 0.0

    @asynccontextmanager
    async def timed(self, name: str) -> AsyncGenerator[None, None]:
        """Measure a finder operation and add it to ``elapsed``."""
        started = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - started
            self.elapsed += duration
            logger.debug("%s took %.3fms", name, duration * 1000)

    # --- Query builders ---

    def q(self) -> Query:
        """Open a new, empty Query on this connection."""
        return Query(self)

    def where(self, stmt: str, *args: Any) -> Query:
        return self.q().where(stmt, *args)

    def order(self, stmt: str) -> Query:
        return self.q().order(stmt)

    def limit(self, count: int) -> Query:
        return self.q().limit(count)

    def paginate(self, page: int, per_page: int) -> Query:
        return self.q().paginate(page, per_page)

    def paginate_from_params(self, params: Mapping[str, Any]) -> Query:
        return self.q().paginate_from_params(params)

    def raw_query(self, stmt: str, *args: Any) -> Query:
        return self.q().raw_query(stmt, *args)

    def select(self, *fields: str) -> Query:
        return self.q().select(*fields)

    def eager(self, *fields: str) -> Query:
        return self.q().eager(*fields)

    # --- Finders ---

    async def find(self, model: type[R], id: Any) -> R:
        return await self.q().find(model, id)

    async def first(self, model: type[R]) -> R:
        return await self.q().first(model)

    async def last(self, model: type[R]) -> R:
        return await self.q().last(model)

    async def all(self, model: type[R]) -> list[R]:
        return await self.q().all(model)

    async def exists(self, model: type[Model]) -> bool:
        return await self.q().exists(model)

    async def count(self, model: type[Model]) -> int:
        return await self.q().count(model)

    async def count_by_field(self, model: type[Model], field: str) -> int:
        return await self.q().count_by_field(model, field)

    async def load(self, value: R | list[R], *fields: str) -> R | list[R]:
        return await self.q().load(value, *fields)
