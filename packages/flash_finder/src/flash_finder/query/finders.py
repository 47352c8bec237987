from __future__ import annotations

import re
import uuid
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from flash_finder.aggregate import RowCount, count_sql, exists_sql
from flash_finder.eager import EagerLoader
from flash_finder.exceptions import QueryExecutionError
from flash_finder.logging import get_logger
from flash_finder.models import run_after_find

from .construction import QueryConstruction

if TYPE_CHECKING:
    from flash_finder.models import Model

R = TypeVar("R", bound="Model")

logger = get_logger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def coerce_id(value: Any) -> Any:
    """
    Normalize a primary key lookup value.

    UUIDs are bound as strings. Numeric strings become integers unless they
    carry a leading zero, so identifiers like ``"007"`` keep their form.

    >>> coerce_id("42"), coerce_id("0"), coerce_id("007"), coerce_id("abc")
    (42, 0, '007', 'abc')
    """
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, str) and value:
        if value[0] != "0" or len(value) == 1:
            if _INTEGER.fullmatch(value):
                return int(value)
    return value


class QueryFinders(QueryConstruction):
    """
    Terminal operations that execute the query.

    Single-record finders raise ``RecordNotFoundError`` when nothing matches.
    Store failures are raised as ``QueryExecutionError`` with the original
    SQLAlchemy error chained.
    """

    async def find(self, model: type[R], id: Any) -> R:
        """
        Find a record by primary key.

        Example:
            >>> await conn.find(User, 1)
            # SELECT ... FROM users WHERE users.id = ? LIMIT 1
        """
        where_id = f"{model.table_name()}.{model.primary_key_name()} = ?"
        return await self.where(where_id, coerce_id(id)).first(model)

    async def first(self, model: type[R]) -> R:
        """
        Return the first record matching the query.

        Example:
            >>> await conn.where("name = ?", "mark").first(User)
        """
        async with self.connection.timed("First"):
            self.limit(1)
            record = await self._select_one(model)
            await record.after_find(self.connection)

        if self.eager_loading:
            await self._eager_associations(record)
        return record

    async def last(self, model: type[R]) -> R:
        """
        Return the most recently created record matching the query.

        Any ORDER set on the query is replaced.

        Example:
            >>> await conn.where("name = ?", "mark").last(User)
            # ... ORDER BY created_at DESC, id DESC LIMIT 1
        """
        async with self.connection.timed("Last"):
            self.limit(1)
            self.order_clauses = []
            self.order(f"created_at DESC, {model.primary_key_name()} DESC")
            record = await self._select_one(model)
            await record.after_find(self.connection)

        if self.eager_loading:
            await self._eager_associations(record)
        return record

    async def all(self, model: type[R]) -> list[R]:
        """
        Return every record matching the query.

        When a paginator is attached its totals are filled in as well.
        Store failures while fetching, counting the page totals or running
        ``after_find`` are raised as "unable to fetch records"; other hook
        errors propagate as raised.

        Example:
            >>> await conn.where("name = ?", "mark").all(User)
        """
        async with self.connection.timed("All"):
            try:
                records = await self.connection.dialect.select_many(
                    self.connection.store, model, self
                )
                await self._paginate_model(model, records)
                await run_after_find(records, self.connection)
            except (SQLAlchemyError, QueryExecutionError) as e:
                msg = f"unable to fetch records: {e}"
                raise QueryExecutionError(msg) from e

        if self.eager_loading:
            await self._eager_associations(records)
        return records

    async def load(self, value: R | list[R], *fields: str) -> R | list[R]:
        """
        Load associations of an already fetched record or list of records.

        Without ``fields`` every declared association is loaded.

        Example:
            >>> user = await conn.first(User)
            >>> await conn.load(user, "books")
        """
        await EagerLoader(self.connection).load(value, fields)
        return value

    async def exists(self, model: type[Model]) -> bool:
        """
        Return True if at least one record matches the query.

        Example:
            >>> await conn.where("name = ?", "mark").exists(User)
            # SELECT EXISTS (SELECT ... FROM users WHERE name = ?)
        """
        tmp = self._aggregate_clone()
        async with self.connection.timed("Exists"):
            sql, args = tmp.to_sql(model)
            row = await self._get(exists_sql(sql), args, "unable to check existence")
        return bool(row[0]) if row is not None else False

    async def count(self, model: type[Model]) -> int:
        """
        Count the records matching the query.

        Example:
            >>> await conn.where("name = ?", "mark").count(User)
            # SELECT COUNT(*) AS row_count FROM (SELECT ...) a
        """
        return await self.count_by_field(model, "*")

    async def count_by_field(self, model: type[Model], field: str) -> int:
        """
        Count the non-null values of ``field`` among the matching records.

        Example:
            >>> await conn.where("sex = ?", "f").count_by_field(User, "name")
        """
        tmp = self._aggregate_clone()
        async with self.connection.timed("CountByField"):
            sql, args = tmp.to_sql(model)
            failure = "unable to count records"
            row = await self._get(count_sql(sql, field), args, failure)
        if row is None:
            return 0
        return RowCount.model_validate(dict(row._mapping)).count

    def _aggregate_clone(self) -> QueryFinders:
        """Copy of the query without parts that would distort an aggregate."""
        tmp = self._clone()
        tmp.paginator = None
        tmp.order_clauses = []
        tmp.limit_results = 0
        return tmp

    async def _get(self, sql: str, args: list[Any], failure: str) -> Any:
        try:
            return await self.connection.dialect.get(self.connection.store, sql, *args)
        except SQLAlchemyError as e:
            msg = f"{failure}: {e}"
            raise QueryExecutionError(msg) from e

    async def _select_one(self, model: type[R]) -> R:
        try:
            return await self.connection.dialect.select_one(
                self.connection.store, model, self
            )
        except SQLAlchemyError as e:
            msg = f"unable to fetch record: {e}"
            raise QueryExecutionError(msg) from e

    async def _paginate_model(self, model: type[Model], records: list[Any]) -> None:
        if self.paginator is None:
            return

        total = await self.count(model)
        self.paginator.update_totals(total=total, current=len(records))

    async def _eager_associations(self, value: Any) -> None:
        # The flag is consumed before any sub-query runs.
        fields = list(self.eager_fields)
        self.disable_eager()
        logger.debug("Eager loading %s", fields or "all associations")
        await EagerLoader(self.connection).load(value, fields)
