from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from .associations import SortableAssociation, for_model
from .exceptions import RecordNotFoundError
from .logging import get_logger

if TYPE_CHECKING:
    from .associations import Association
    from .connection import Connection

logger = get_logger(__name__)


class EagerLoader:
    """
    Resolves declared associations of already fetched records.

    One query is issued per association, in declaration order, and nested
    paths (``"books.writers"``) are resolved once their parent association is
    populated. Sub-queries are fresh queries on the same connection, so they
    never inherit an eager request.

    Example:
        >>> user = await conn.first(User)
        >>> await EagerLoader(conn).load(user, ["books.writers", "profile"])
    """

    def __init__(self, connection: Connection):
        self.connection = connection

    async def load(self, value: Any, fields: Sequence[str] = ()) -> None:
        """
        Populate the associations of a record or of every record in a list.

        A missing single-valued association is left as ``None``. Any other
        error stops the load and propagates unchanged.
        """
        if value is None:
            return

        if isinstance(value, (list, tuple)):
            for record in value:
                await self.load(record, fields)
            return

        for association in for_model(value, *fields):
            if association.skipped:
                logger.debug(
                    "Skipping %s.%s", type(value).__name__, association.name
                )
                continue
            await self._load_association(association)

            for inner in association.inner:
                nested = getattr(value, inner.name)
                await EagerLoader(self.connection).load(nested, [inner.fields])

    async def _load_association(self, association: Association) -> None:
        condition, args = association.constraint()
        query = self.connection.q().where(condition, *args)

        if isinstance(association, SortableAssociation):
            order = association.order_clause()
            if order:
                query = query.order(order)

        # Re-issue the generated statement verbatim.
        sql, sql_args = query.to_sql(association.target)
        query = self.connection.q().raw_query(sql, *sql_args)

        if association.multi:
            association.assign(await query.all(association.target))
            return

        try:
            association.assign(await query.first(association.target))
        except RecordNotFoundError:
            logger.debug(
                "No %s found for %s.%s",
                association.target.__name__,
                type(association.owner).__name__,
                association.name,
            )
