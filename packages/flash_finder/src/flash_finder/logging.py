import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Generator, Iterable, Optional, Union

from .config import finder_settings

# Context-local id attached to every record emitted while a unit of work runs
trace_id: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

SQL_LOGGER_NAME = "flash_finder.sql"


class TraceFormatter(logging.Formatter):
    """
    Formatter that injects the current trace id and enforces UTC.
    """

    def __init__(self, fmt: str | None = None, datefmt: str | None = None):
        super().__init__(fmt, datefmt)
        self.converter = time.gmtime

    def formatTime(self, record, datefmt=None):  # noqa: N802
        """ISO-8601 UTC timestamps."""
        ct = self.converter(record.created)
        if datefmt:
            return time.strftime(datefmt, ct)
        t = time.strftime("%Y-%m-%d %H:%M:%S", ct)
        return "%s.%03dZ" % (t, record.msecs)

    def format(self, record: logging.LogRecord) -> str:
        tid = trace_id.get()
        # Distinct attribute name so it never collides with extra={}
        record.trace_str = f"[{tid}] " if tid else ""
        return super().format(record)


def get_logger(name: str) -> logging.Logger:
    """
    Returns a standard logger instance.

    >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def log_sql(sql: str, args: Iterable[Any] = ()) -> None:
    """
    Log a statement about to be sent to the store.

    Statements go to the ``flash_finder.sql`` logger at DEBUG, or at INFO
    when ``LOG_SQL`` is enabled.
    """
    level = logging.INFO if finder_settings.LOG_SQL else logging.DEBUG
    logger = logging.getLogger(SQL_LOGGER_NAME)
    if logger.isEnabledFor(level):
        logger.log(level, "%s %s", sql, list(args))


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = 10_485_760,  # 10MB
    backup_count: int = 10,
    capture_roots: bool = False,
    module_name: str = "flash_finder",
) -> None:
    """
    Configure logging for the finder namespace (or the root logger).

    Args:
        level: Logging level, defaults to ``LOG_LEVEL`` from settings.
        log_file: Optional path for a rotating log file.
        capture_roots: If True, configures the root logger instead of
                       only the ``flash_finder.*`` loggers.
    """
    if level is None:
        level = finder_settings.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    target_logger = (
        logging.getLogger() if capture_roots else logging.getLogger(module_name)
    )

    # Reset handlers so tests can reconfigure
    target_logger.handlers.clear()
    target_logger.setLevel(level)

    log_format = "%(asctime)s %(levelname)-8s %(trace_str)s%(name)s: %(message)s"
    formatter = TraceFormatter(log_format)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    target_logger.addHandler(console)

    if log_file:
        file_path = Path(log_file).resolve()
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            target_logger.addHandler(file_handler)
        except OSError as e:
            # Read-only filesystems keep the console handler only
            sys.stderr.write(f"Failed to setup log file: {e}\n")

    if not capture_roots:
        target_logger.propagate = False


def set_trace_id(value: str) -> Token:
    """
    Sets the trace id and returns a token for cleanup.
    """
    return trace_id.set(value)


def reset_trace_id(token: Token) -> None:
    trace_id.reset(token)


@contextmanager
def scoped_trace_id(value: str) -> Generator[None, None, None]:
    """
    Tag every log record emitted inside the block with ``value``.

    >>> with scoped_trace_id("load-users"):
    ...     pass
    """
    token = set_trace_id(value)
    try:
        yield
    finally:
        reset_trace_id(token)
