from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .exceptions import AssociationError, RecordNotFoundError

if TYPE_CHECKING:
    from .associations.base import Relation
    from .connection import Connection

# Model classes by name, used to resolve string association targets.
_models: dict[str, type[Model]] = {}


class Model(AsyncAttrs, DeclarativeBase):
    """
    Base class for all records handled by the finder engine.

    Provides an ``id`` primary key and the record capability the engine is
    written against: table name, primary key, column list, declared
    associations and the ``after_find`` hook.

    Example:
        >>> class User(Model):
        ...     __tablename__ = "users"
        ...     name: Mapped[str] = mapped_column()
        ...     books = HasMany("Book", order_by="title asc")
    """

    __abstract__ = True
    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    DoesNotExist = RecordNotFoundError

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("__abstract__"):
            _models[cls.__name__] = cls

    @classmethod
    def table_name(cls) -> str:
        return cls.__tablename__

    @classmethod
    def primary_key_name(cls) -> str:
        return cls.__table__.primary_key.columns.values()[0].name

    @classmethod
    def column_names(cls) -> list[str]:
        return [column.name for column in cls.__table__.columns]

    @classmethod
    def relations(cls) -> dict[str, Relation]:
        """
        Declared associations in declaration order, base classes first.
        """
        from .associations.base import Relation

        found: dict[str, Relation] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Relation):
                    found[name] = attr
        return found

    @property
    def primary_key_value(self) -> Any:
        return getattr(self, self.primary_key_name())

    async def after_find(self, connection: Connection) -> None:
        """
        Hook invoked once the record has been fetched. No-op by default.
        """


class TimestampMixin:
    """
    Mixin that adds `created_at` and `updated_at` fields to a model.

    ``Query.last`` orders on ``created_at``.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        server_onupdate=func.now(),
        nullable=True,
    )


def resolve_model(target: type[Model] | str) -> type[Model]:
    """Return the model class for a class object or a registered class name."""
    if isinstance(target, str):
        try:
            return _models[target]
        except KeyError:
            msg = f"Model '{target}' is not registered"
            raise AssociationError(msg) from None
    return target


async def run_after_find(value: Model | list[Model], connection: Connection) -> None:
    """Invoke ``after_find`` on a record or on every record of a collection."""
    if isinstance(value, list):
        for record in value:
            await record.after_find(connection)
        return
    await value.after_find(connection)
