from .associations import BelongsTo, HasMany, HasOne, ManyToMany
from .config import FinderSettings, finder_settings
from .connection import Connection
from .db import close_db, get_connection, get_db, init_db
from .dialect import Dialect, SQLAlchemyDialect
from .eager import EagerLoader
from .exceptions import (
    AssociationError,
    FinderError,
    QueryExecutionError,
    RecordNotFoundError,
)
from .models import Model, TimestampMixin
from .paginator import Paginator
from .query import Query

__all__ = [
    "AssociationError",
    "BelongsTo",
    "Connection",
    "Dialect",
    "EagerLoader",
    "FinderError",
    "FinderSettings",
    "HasMany",
    "HasOne",
    "ManyToMany",
    "Model",
    "Paginator",
    "Query",
    "QueryExecutionError",
    "RecordNotFoundError",
    "SQLAlchemyDialect",
    "TimestampMixin",
    "close_db",
    "finder_settings",
    "get_connection",
    "get_db",
    "init_db",
]
