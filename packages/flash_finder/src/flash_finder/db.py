"""
Engine setup and the Connection factory used by applications and tests.
"""

from collections.abc import AsyncGenerator
from typing import Any, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import finder_settings
from .connection import Connection
from .dialect import Dialect
from .logging import get_logger

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_sessions: Optional[async_sessionmaker[AsyncSession]] = None


def init_db(
    database_url: Optional[str] = None,
    *,
    echo: bool = False,
    **engine_kwargs: Any,
) -> AsyncEngine:
    """
    Create the engine that finder connections run on.

    ``postgresql://`` URLs are switched to the asyncpg driver. Extra keyword
    arguments go to ``create_async_engine`` untouched.

    Example:
        >>> engine = init_db("sqlite+aiosqlite:///db.sqlite3")
    """
    global _engine, _sessions

    raw_url = database_url or finder_settings.DATABASE_URL
    if not raw_url:
        msg = "No database URL given and DATABASE_URL is not set."
        raise RuntimeError(msg)

    url = make_url(raw_url)
    if url.drivername == "postgresql":
        url = url.set(drivername="postgresql+asyncpg")

    _engine = create_async_engine(url, echo=echo, **engine_kwargs)
    _sessions = async_sessionmaker(_engine, expire_on_commit=False)
    logger.debug("Finder engine ready on %s", url.drivername)
    return _engine


async def close_db() -> None:
    """Dispose of the engine. ``init_db`` must be called again afterwards."""
    global _engine, _sessions

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _sessions = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session bound to the finder engine.

    Raises:
        RuntimeError: If ``init_db`` has not been called.
    """
    if _sessions is None:
        msg = "Database not initialized. Call init_db() first."
        raise RuntimeError(msg)
    async with _sessions() as session:
        yield session


async def get_connection(
    dialect: Optional[Dialect] = None,
) -> AsyncGenerator[Connection, None]:
    """
    Yield a finder Connection over a fresh session.

    Example:
        >>> async for conn in get_connection():
        ...     users = await conn.all(User)
    """
    async for session in get_db():
        yield Connection(session, dialect)
